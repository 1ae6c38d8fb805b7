"""Tool catalog advertised by ``tools/list``.

Input schemas are generated from the pydantic models in
``gsuite_mcp.schemas``, so the advertised schema and the validation applied
on ``tools/call`` can't drift apart.
"""

from dataclasses import dataclass

from mcp.types import Tool
from pydantic import BaseModel

from gsuite_mcp.schemas import (
    CreateDocInput,
    CreateFileInput,
    CreateFolderInput,
    CreateSpreadsheetInput,
    DimensionOperationInput,
    FormatCellsInput,
    GetDocContentInput,
    GetFileInput,
    GetValuesInput,
    ListFilesInput,
    MergeCellsInput,
    SearchInput,
    UpdateDocContentInput,
    UpdateFileInput,
    UpdateFileMetadataInput,
    UpdateValuesInput,
)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: type[BaseModel]

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_model.model_json_schema(by_alias=True),
        )


TOOL_SPECS: list[ToolSpec] = [
    # Drive
    ToolSpec("search", "Search for files in Google Drive", SearchInput),
    ToolSpec("drive_create_folder", "Create a new folder in Google Drive", CreateFolderInput),
    ToolSpec("drive_create_file", "Create a new file in Google Drive", CreateFileInput),
    ToolSpec("drive_update_file", "Update an existing file in Google Drive", UpdateFileInput),
    ToolSpec("drive_get_file", "Get file metadata from Google Drive", GetFileInput),
    ToolSpec(
        "drive_list_files",
        "List files in Google Drive with optional filtering",
        ListFilesInput,
    ),
    ToolSpec(
        "drive_update_metadata",
        "Update file metadata in Google Drive (rename, describe, move)",
        UpdateFileMetadataInput,
    ),
    # Docs
    ToolSpec(
        "docs_create",
        "Create a new Google Doc, optionally with a cover page, headers, footer "
        "and styled body sections",
        CreateDocInput,
    ),
    ToolSpec("docs_get_content", "Get the plain-text content of a Google Doc", GetDocContentInput),
    ToolSpec(
        "docs_update_content",
        "Replace the content of a Google Doc. content.type selects plain_text, "
        "styled_section, full_document, or requests (raw Docs API requests)",
        UpdateDocContentInput,
    ),
    # Sheets
    ToolSpec("sheets_create", "Create a new Google Spreadsheet", CreateSpreadsheetInput),
    ToolSpec("sheets_update_values", "Update values in a spreadsheet range", UpdateValuesInput),
    ToolSpec("sheets_format_cells", "Apply formatting to a spreadsheet range", FormatCellsInput),
    ToolSpec(
        "sheets_dimension_operation",
        "Insert, delete, or resize rows or columns",
        DimensionOperationInput,
    ),
    ToolSpec("sheets_merge_cells", "Merge cells in a spreadsheet range", MergeCellsInput),
    ToolSpec("sheets_get_values", "Get values from a spreadsheet range", GetValuesInput),
]

TOOL_MODELS: dict[str, type[BaseModel]] = {spec.name: spec.input_model for spec in TOOL_SPECS}


def list_tools() -> list[Tool]:
    """Return the MCP tool definitions, in catalog order."""
    return [spec.to_tool() for spec in TOOL_SPECS]
