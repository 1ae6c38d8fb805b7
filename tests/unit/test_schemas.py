"""Unit tests for tool input models and the tool catalog."""

import pytest
from pydantic import ValidationError

from gsuite_mcp.schemas import (
    CellFormat,
    DimensionOperationInput,
    FullDocument,
    PlainText,
    RawRequests,
    SearchInput,
    StyledSection,
    UpdateDocContentInput,
    UpdateValuesInput,
)
from gsuite_mcp.server.tools import TOOL_MODELS, TOOL_SPECS, list_tools


@pytest.mark.unit
class TestDimensionOperationInput:
    """Tests for DimensionOperationInput validation."""

    def test_should_reject_resize_without_size(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            DimensionOperationInput.model_validate(
                {
                    "spreadsheetId": "sheet_1",
                    "sheetId": 0,
                    "dimension": "COLUMNS",
                    "startIndex": 0,
                    "operation": "RESIZE",
                }
            )

        assert "size is required" in str(exc_info.value)

    def test_should_accept_resize_with_size(self) -> None:
        params = DimensionOperationInput.model_validate(
            {
                "spreadsheetId": "sheet_1",
                "sheetId": 0,
                "dimension": "COLUMNS",
                "startIndex": 0,
                "operation": "RESIZE",
                "size": 120,
            }
        )
        assert params.size == 120
        assert params.end_index is None

    def test_should_reject_empty_span(self) -> None:
        with pytest.raises(ValidationError):
            DimensionOperationInput.model_validate(
                {
                    "spreadsheetId": "sheet_1",
                    "sheetId": 0,
                    "dimension": "ROWS",
                    "startIndex": 5,
                    "endIndex": 5,
                    "operation": "DELETE",
                }
            )


@pytest.mark.unit
class TestDocumentContent:
    """Tests for the tagged document content variant."""

    @pytest.mark.parametrize(
        ("content", "expected_type"),
        [
            ({"type": "plain_text", "text": "Hi"}, PlainText),
            ({"type": "styled_section", "text": "Hi", "style": {"bold": True}}, StyledSection),
            ({"type": "full_document", "body": [{"text": "Hi"}]}, FullDocument),
            ({"type": "requests", "requests": [{"insertText": {}}]}, RawRequests),
        ],
    )
    def test_should_select_variant_by_type(self, content: dict, expected_type: type) -> None:
        params = UpdateDocContentInput.model_validate({"document_id": "doc_1", "content": content})
        assert isinstance(params.content, expected_type)

    def test_should_reject_unknown_type(self) -> None:
        with pytest.raises(ValidationError):
            UpdateDocContentInput.model_validate(
                {"document_id": "doc_1", "content": {"type": "markdown", "text": "# Hi"}}
            )

    def test_should_reject_empty_request_batch(self) -> None:
        with pytest.raises(ValidationError):
            UpdateDocContentInput.model_validate(
                {"document_id": "doc_1", "content": {"type": "requests", "requests": []}}
            )

    def test_should_accept_camel_case_layout_keys(self) -> None:
        params = UpdateDocContentInput.model_validate(
            {
                "document_id": "doc_1",
                "content": {
                    "type": "full_document",
                    "coverPage": {"title": "Report"},
                    "headers": {"firstPage": "Confidential"},
                    "body": [{"text": "Hi", "style": {"fontSize": 11, "spaceAbove": 6}}],
                },
            }
        )
        content = params.content
        assert isinstance(content, FullDocument)
        assert content.cover_page is not None and content.cover_page.title == "Report"
        assert content.headers is not None and content.headers.first_page == "Confidential"
        assert content.body[0].style is not None
        assert content.body[0].style.space_above == 6


@pytest.mark.unit
class TestOtherInputs:
    def test_search_defaults_page_size(self) -> None:
        assert SearchInput.model_validate({"query": "report"}).page_size == 10

    def test_update_values_coerces_numbers_to_strings(self) -> None:
        params = UpdateValuesInput.model_validate(
            {"spreadsheetId": "s", "range": "A1:B1", "values": [[1, 2.5]]}
        )
        assert params.values == [["1", "2.5"]]

    def test_cell_format_dumps_api_names(self) -> None:
        cell_format = CellFormat.model_validate(
            {
                "textFormat": {"bold": True},
                "horizontalAlignment": "CENTER",
                "numberFormat": {"type": "PERCENTAGE", "pattern": "0.0%"},
            }
        )

        assert cell_format.to_api() == {
            "textFormat": {"bold": True},
            "horizontalAlignment": "CENTER",
            "numberFormat": {"type": "PERCENT", "pattern": "0.0%"},
        }


@pytest.mark.unit
class TestToolCatalog:
    """Tests for the advertised tool list."""

    def test_should_list_all_sixteen_tools(self) -> None:
        names = [tool.name for tool in list_tools()]

        assert names == [
            "search",
            "drive_create_folder",
            "drive_create_file",
            "drive_update_file",
            "drive_get_file",
            "drive_list_files",
            "drive_update_metadata",
            "docs_create",
            "docs_get_content",
            "docs_update_content",
            "sheets_create",
            "sheets_update_values",
            "sheets_format_cells",
            "sheets_dimension_operation",
            "sheets_merge_cells",
            "sheets_get_values",
        ]
        assert set(TOOL_MODELS) == {spec.name for spec in TOOL_SPECS}

    def test_should_advertise_wire_argument_names(self) -> None:
        schemas = {tool.name: tool.inputSchema for tool in list_tools()}

        assert set(schemas["search"]["properties"]) == {"query", "page_size"}
        assert schemas["search"]["required"] == ["query"]
        assert "fileId" in schemas["drive_update_file"]["properties"]
        assert "spreadsheetId" in schemas["sheets_get_values"]["properties"]
        assert "document_id" in schemas["docs_update_content"]["properties"]
        assert sorted(schemas["drive_create_file"]["required"]) == ["content", "mimeType", "name"]
