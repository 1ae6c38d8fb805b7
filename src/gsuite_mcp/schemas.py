"""Pydantic input models for every gsuite-mcp tool.

Each tool's arguments are validated (and coerced) by one of the ``*Input``
models below before anything reaches an adapter; the same models supply
the JSON Schemas advertised by ``tools/list``.

Argument names keep their wire spelling: Drive and Sheets tools use
camelCase (``fileId``, ``spreadsheetId``), search and Docs tools use
snake_case (``page_size``, ``document_id``). Python attribute names are
always snake_case.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel

Dimension = Literal["ROWS", "COLUMNS"]


class CamelModel(BaseModel):
    """Base model accepting camelCase keys (and snake_case by name)."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class SnakeModel(BaseModel):
    """Base model whose wire keys are the snake_case field names."""

    model_config = {"populate_by_name": True}


# =============================================================================
# Style descriptors
# =============================================================================


class RGBColor(CamelModel):
    """Docs color; missing channels default to 0 on the API side."""

    red: float | None = Field(default=None, ge=0, le=1)
    green: float | None = Field(default=None, ge=0, le=1)
    blue: float | None = Field(default=None, ge=0, le=1)


class FontFamily(CamelModel):
    family: str
    weight: int | None = Field(default=None, ge=100, le=900)


class TextStyle(CamelModel):
    """Declarative style for a run of Docs text.

    Run-level attributes map to ``updateTextStyle``; paragraph-level ones
    to ``updateParagraphStyle``. Only attributes that are set are applied.
    """

    # Run-level
    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    strikethrough: bool | None = None
    font_size: float | None = Field(default=None, gt=0, description="Font size in points")
    foreground_color: RGBColor | None = None
    background_color: RGBColor | None = None
    font_family: FontFamily | None = None

    # Paragraph-level
    heading: Literal[
        "NORMAL", "HEADING_1", "HEADING_2", "HEADING_3", "HEADING_4", "HEADING_5", "HEADING_6"
    ] | None = None
    alignment: Literal["START", "CENTER", "END", "JUSTIFIED"] | None = None
    line_spacing: float | None = Field(default=None, description="Percent, 100 = single")
    space_above: float | None = Field(default=None, description="Points")
    space_below: float | None = Field(default=None, description="Points")
    indent_start: float | None = Field(default=None, description="Points")
    indent_end: float | None = Field(default=None, description="Points")
    indent_first_line: float | None = Field(default=None, description="Points")
    direction: Literal["LEFT_TO_RIGHT", "RIGHT_TO_LEFT"] | None = None
    keep_lines_together: bool | None = None
    keep_with_next: bool | None = None
    page_break_before: bool | None = None


class SheetsColor(CamelModel):
    red: float = Field(..., ge=0, le=1)
    green: float = Field(..., ge=0, le=1)
    blue: float = Field(..., ge=0, le=1)
    alpha: float | None = Field(default=None, ge=0, le=1)


class TextFormat(CamelModel):
    foreground_color: SheetsColor | None = None
    font_family: str | None = None
    font_size: int | None = Field(default=None, gt=0)
    bold: bool | None = None
    italic: bool | None = None
    strikethrough: bool | None = None
    underline: bool | None = None


class Border(CamelModel):
    style: Literal["SOLID", "DOTTED", "DASHED"]
    color: SheetsColor


class Borders(CamelModel):
    top: Border | None = None
    bottom: Border | None = None
    left: Border | None = None
    right: Border | None = None


class NumberFormat(CamelModel):
    type: Literal["TEXT", "NUMBER", "CURRENCY", "DATE", "TIME", "DATE_TIME", "PERCENT"]
    pattern: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_type_names(cls, data: Any) -> Any:
        # Older clients send DATETIME/PERCENTAGE; the API spells them differently
        if isinstance(data, dict) and "type" in data:
            legacy = {"DATETIME": "DATE_TIME", "PERCENTAGE": "PERCENT"}
            data = {**data, "type": legacy.get(data["type"], data["type"])}
        return data


class CellFormat(CamelModel):
    """Sheets cell format; dumped by alias it is a valid ``userEnteredFormat``."""

    background_color: SheetsColor | None = None
    text_format: TextFormat | None = None
    horizontal_alignment: Literal["LEFT", "CENTER", "RIGHT"] | None = None
    vertical_alignment: Literal["TOP", "MIDDLE", "BOTTOM"] | None = None
    borders: Borders | None = None
    number_format: NumberFormat | None = None

    def to_api(self) -> dict[str, Any]:
        """Return the API ``CellFormat`` dict with unset fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Document content descriptors
# =============================================================================


class CoverPage(CamelModel):
    title: str
    subtitle: str | None = None
    date: str | None = None


class Headers(CamelModel):
    default: str | None = None
    first_page: str | None = None


class DocumentSection(CamelModel):
    text: str
    style: TextStyle | None = None


class DocumentLayout(CamelModel):
    """Cover page, headers, footer, and body sections of a document."""

    cover_page: CoverPage | None = None
    headers: Headers | None = None
    footer: str | None = None
    body: list[DocumentSection] = Field(default_factory=list)


class PlainText(CamelModel):
    type: Literal["plain_text"] = "plain_text"
    text: str


class StyledSection(CamelModel):
    type: Literal["styled_section"] = "styled_section"
    text: str
    style: TextStyle | None = None


class FullDocument(DocumentLayout):
    type: Literal["full_document"] = "full_document"


class RawRequests(CamelModel):
    """API-native Docs requests, applied verbatim as one batch."""

    type: Literal["requests"] = "requests"
    requests: list[dict[str, Any]] = Field(..., min_length=1)


DocumentContent = Annotated[
    PlainText | StyledSection | FullDocument | RawRequests,
    Field(discriminator="type"),
]


# =============================================================================
# Drive tool inputs
# =============================================================================


class SearchInput(SnakeModel):
    query: str = Field(..., description="Full-text search terms")
    page_size: int = Field(default=10, ge=1, le=1000)


class CreateFolderInput(CamelModel):
    name: str
    parents: list[str] | None = Field(default=None, description="Parent folder IDs")
    description: str | None = None


class CreateFileInput(CamelModel):
    name: str
    mime_type: str
    content: str
    parents: list[str] | None = Field(default=None, description="Parent folder IDs")
    description: str | None = None


class UpdateFileInput(CamelModel):
    file_id: str
    content: str
    mime_type: str


class GetFileInput(CamelModel):
    file_id: str
    fields: str | None = Field(default=None, description="Drive field projection")


class ListFilesInput(CamelModel):
    query: str | None = Field(default=None, description="Drive query (q) expression")
    page_size: int | None = Field(default=None, ge=1, le=1000)
    fields: str | None = None
    order_by: str | None = None
    page_token: str | None = None


class UpdateFileMetadataInput(CamelModel):
    file_id: str
    name: str | None = None
    description: str | None = None
    mime_type: str | None = None
    add_parents: list[str] | None = None
    remove_parents: list[str] | None = None


# =============================================================================
# Docs tool inputs
# =============================================================================


class CreateDocInput(SnakeModel):
    title: str
    content: DocumentLayout | None = None


class GetDocContentInput(SnakeModel):
    document_id: str


class UpdateDocContentInput(SnakeModel):
    document_id: str
    content: DocumentContent


# =============================================================================
# Sheets tool inputs
# =============================================================================


class GridProperties(CamelModel):
    row_count: int | None = Field(default=None, ge=1)
    column_count: int | None = Field(default=None, ge=1)
    frozen_row_count: int | None = Field(default=None, ge=0)
    frozen_column_count: int | None = Field(default=None, ge=0)


class SheetSpec(CamelModel):
    title: str
    grid_properties: GridProperties | None = None


class CreateSpreadsheetInput(CamelModel):
    title: str
    sheets: list[SheetSpec] | None = None


class UpdateValuesInput(CamelModel):
    spreadsheet_id: str
    range: str = Field(..., description="A1 notation, e.g. Sheet1!A1:C3")
    values: list[list[str]]
    major_dimension: Dimension | None = None

    model_config = {"coerce_numbers_to_str": True}


class FormatCellsInput(CamelModel):
    spreadsheet_id: str
    range: str = Field(..., description="A1 notation, e.g. Sheet1!A1:C3")
    format: CellFormat


class DimensionOperationInput(CamelModel):
    spreadsheet_id: str
    sheet_id: int
    dimension: Dimension
    start_index: int = Field(..., ge=0)
    end_index: int | None = Field(default=None, description="Exclusive; defaults to startIndex + 1")
    operation: Literal["INSERT", "DELETE", "RESIZE"]
    size: int | None = Field(default=None, ge=0, description="Pixel size, required for RESIZE")

    @model_validator(mode="after")
    def _check_bounds(self) -> "DimensionOperationInput":
        if self.operation == "RESIZE" and self.size is None:
            raise ValueError("size is required for RESIZE operations")
        if self.end_index is not None and self.end_index <= self.start_index:
            raise ValueError("endIndex must be greater than startIndex")
        return self


class MergeCellsInput(CamelModel):
    spreadsheet_id: str
    range: str = Field(..., description="A1 notation, e.g. Sheet1!A1:C3")
    merge_type: Literal["MERGE_ALL", "MERGE_COLUMNS", "MERGE_ROWS"] = "MERGE_ALL"


class GetValuesInput(CamelModel):
    spreadsheet_id: str
    range: str = Field(..., description="A1 notation, e.g. Sheet1!A1:C3")
    major_dimension: Dimension | None = None
