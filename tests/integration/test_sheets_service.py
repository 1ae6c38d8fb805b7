"""Integration tests for the Sheets adapter."""

import pytest

from gsuite_mcp.schemas import CellFormat, GridProperties, SheetSpec
from gsuite_mcp.services.sheets import SheetsService

SPREADSHEET_PATH = "/v4/spreadsheets/ss_1"
BATCH_PATH = "/v4/spreadsheets/ss_1:batchUpdate"

SHEET_PROPERTIES = {
    "sheets": [
        {"properties": {"sheetId": 0, "title": "Sheet1"}},
        {"properties": {"sheetId": 42, "title": "My Data"}},
    ]
}


@pytest.fixture
def sheets(api_client) -> SheetsService:
    return SheetsService(api_client)


@pytest.mark.integration
class TestSpreadsheetValues:
    """Tests for creating spreadsheets and reading/writing values."""

    @pytest.mark.asyncio
    async def test_should_create_spreadsheet_with_sheets(self, sheets, fake_api) -> None:
        fake_api.add("POST", "/v4/spreadsheets", {"spreadsheetId": "ss_1"})

        spreadsheet_id = await sheets.create_spreadsheet(
            "Budget",
            [SheetSpec(title="Q1", grid_properties=GridProperties(frozen_row_count=1))],
        )

        assert spreadsheet_id == "ss_1"
        assert fake_api.body(fake_api.sent("POST", "/v4/spreadsheets")[0]) == {
            "properties": {"title": "Budget"},
            "sheets": [{"properties": {"title": "Q1", "gridProperties": {"frozenRowCount": 1}}}],
        }

    @pytest.mark.asyncio
    async def test_should_write_values_as_user_entered(self, sheets, fake_api) -> None:
        path = "/v4/spreadsheets/ss_1/values/Sheet1!A1:B2"
        fake_api.add("PUT", path, {"updatedCells": 4})

        result = await sheets.update_values(
            "ss_1", "Sheet1!A1:B2", [["a", "b"], ["=SUM(1,2)", "3"]], "ROWS"
        )

        request = fake_api.sent("PUT", path)[0]
        assert request.url.params["valueInputOption"] == "USER_ENTERED"
        assert fake_api.body(request) == {
            "range": "Sheet1!A1:B2",
            "values": [["a", "b"], ["=SUM(1,2)", "3"]],
            "majorDimension": "ROWS",
        }
        assert result == {"updatedCells": 4}

    @pytest.mark.asyncio
    async def test_should_encode_spaces_in_range(self, sheets, fake_api) -> None:
        fake_api.add("GET", "/v4/spreadsheets/ss_1/values/'My Data'!A1:A3", {})

        await sheets.get_values("ss_1", "'My Data'!A1:A3")

        request = fake_api.requests[0]
        assert "/values/'My%20Data'!A1:A3" in request.url.raw_path.decode("ascii")

    @pytest.mark.asyncio
    async def test_should_return_empty_list_for_empty_range(self, sheets, fake_api) -> None:
        fake_api.add("GET", "/v4/spreadsheets/ss_1/values/A1:C3", {"range": "Sheet1!A1:C3"})

        assert await sheets.get_values("ss_1", "A1:C3") == []

    @pytest.mark.asyncio
    async def test_should_return_values(self, sheets, fake_api) -> None:
        fake_api.add("GET", "/v4/spreadsheets/ss_1/values/A1:B1", {"values": [["x", "1"]]})

        assert await sheets.get_values("ss_1", "A1:B1", "COLUMNS") == [["x", "1"]]
        assert fake_api.requests[0].url.params["majorDimension"] == "COLUMNS"


@pytest.mark.integration
class TestSheetsGridOperations:
    """Tests for operations that resolve A1 ranges to grid ranges."""

    @pytest.mark.asyncio
    async def test_should_format_named_sheet_with_field_mask(self, sheets, fake_api) -> None:
        fake_api.add("GET", SPREADSHEET_PATH, SHEET_PROPERTIES)
        fake_api.add("POST", BATCH_PATH, {"replies": [{}]})
        cell_format = CellFormat.model_validate(
            {"textFormat": {"bold": True}, "horizontalAlignment": "CENTER"}
        )

        await sheets.format_cells("ss_1", "'My Data'!A1:C10", cell_format)

        lookup = fake_api.sent("GET", SPREADSHEET_PATH)[0]
        assert lookup.url.params["fields"] == "sheets.properties(sheetId,title)"
        batch = fake_api.body(fake_api.sent("POST", BATCH_PATH)[0])
        assert batch["requests"] == [
            {
                "repeatCell": {
                    "range": {
                        "sheetId": 42,
                        "startRowIndex": 0,
                        "endRowIndex": 10,
                        "startColumnIndex": 0,
                        "endColumnIndex": 3,
                    },
                    "cell": {
                        "userEnteredFormat": {
                            "textFormat": {"bold": True},
                            "horizontalAlignment": "CENTER",
                        }
                    },
                    "fields": "userEnteredFormat.textFormat,userEnteredFormat.horizontalAlignment",
                }
            }
        ]

    @pytest.mark.asyncio
    async def test_should_reject_empty_format(self, sheets, fake_api) -> None:
        with pytest.raises(ValueError, match="at least one field"):
            await sheets.format_cells("ss_1", "A1", CellFormat())

        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_should_merge_first_sheet_when_unnamed(self, sheets, fake_api) -> None:
        fake_api.add("GET", SPREADSHEET_PATH, SHEET_PROPERTIES)
        fake_api.add("POST", BATCH_PATH, {"replies": [{}]})

        await sheets.merge_cells("ss_1", "B2:D2", "MERGE_ROWS")

        batch = fake_api.body(fake_api.sent("POST", BATCH_PATH)[0])
        assert batch["requests"] == [
            {
                "mergeCells": {
                    "range": {
                        "sheetId": 0,
                        "startRowIndex": 1,
                        "endRowIndex": 2,
                        "startColumnIndex": 1,
                        "endColumnIndex": 4,
                    },
                    "mergeType": "MERGE_ROWS",
                }
            }
        ]

    @pytest.mark.asyncio
    async def test_should_raise_for_unknown_sheet(self, sheets, fake_api) -> None:
        fake_api.add("GET", SPREADSHEET_PATH, SHEET_PROPERTIES)

        with pytest.raises(ValueError, match="Sheet not found"):
            await sheets.merge_cells("ss_1", "Missing!A1:B2")

        assert fake_api.sent("POST", BATCH_PATH) == []

    @pytest.mark.asyncio
    async def test_should_raise_when_spreadsheet_has_no_sheets(self, sheets, fake_api) -> None:
        fake_api.add("GET", SPREADSHEET_PATH, {})

        with pytest.raises(ValueError, match="has no sheets"):
            await sheets.merge_cells("ss_1", "A1:B2")


@pytest.mark.integration
class TestDimensionOperation:
    """Tests for SheetsService.dimension_operation()."""

    async def _sent_request(self, sheets, fake_api, **kwargs) -> dict:
        fake_api.add("POST", BATCH_PATH, {"replies": [{}]})
        await sheets.dimension_operation("ss_1", 7, **kwargs)
        return fake_api.body(fake_api.sent("POST", BATCH_PATH)[0])["requests"][0]

    @pytest.mark.asyncio
    async def test_should_insert_rows_inheriting_from_before(self, sheets, fake_api) -> None:
        request = await self._sent_request(
            sheets, fake_api, dimension="ROWS", start_index=3, operation="INSERT", end_index=5
        )

        assert request == {
            "insertDimension": {
                "range": {"sheetId": 7, "dimension": "ROWS", "startIndex": 3, "endIndex": 5},
                "inheritFromBefore": True,
            }
        }

    @pytest.mark.asyncio
    async def test_should_not_inherit_when_inserting_at_start(self, sheets, fake_api) -> None:
        request = await self._sent_request(
            sheets, fake_api, dimension="COLUMNS", start_index=0, operation="INSERT"
        )

        assert request["insertDimension"]["inheritFromBefore"] is False
        assert request["insertDimension"]["range"]["endIndex"] == 1

    @pytest.mark.asyncio
    async def test_should_delete_dimension(self, sheets, fake_api) -> None:
        request = await self._sent_request(
            sheets, fake_api, dimension="ROWS", start_index=2, operation="DELETE"
        )

        assert request == {
            "deleteDimension": {
                "range": {"sheetId": 7, "dimension": "ROWS", "startIndex": 2, "endIndex": 3}
            }
        }

    @pytest.mark.asyncio
    async def test_should_resize_with_pixel_size(self, sheets, fake_api) -> None:
        request = await self._sent_request(
            sheets, fake_api, dimension="COLUMNS", start_index=1, operation="RESIZE", size=200
        )

        assert request["updateDimensionProperties"] == {
            "range": {"sheetId": 7, "dimension": "COLUMNS", "startIndex": 1, "endIndex": 2},
            "properties": {"pixelSize": 200},
            "fields": "pixelSize",
        }

    @pytest.mark.asyncio
    async def test_should_require_size_for_resize(self, sheets, fake_api) -> None:
        with pytest.raises(ValueError, match="size is required"):
            await sheets.dimension_operation("ss_1", 7, "COLUMNS", 1, "RESIZE")

        assert fake_api.requests == []
