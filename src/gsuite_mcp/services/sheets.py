"""Google Sheets operations."""

import logging
from typing import Any
from urllib.parse import quote

from gsuite_mcp.schemas import CellFormat, SheetSpec
from gsuite_mcp.services.a1 import parse_a1_range
from gsuite_mcp.services.client import SHEETS_API_BASE, GoogleApiClient

logger = logging.getLogger(__name__)


class SheetsService:
    """Sheets v4 adapter.

    Ranges are A1 notation throughout. Operations that need a ``GridRange``
    parse the notation and look up the sheet ID by title (the first sheet
    when the range names none).
    """

    def __init__(self, client: GoogleApiClient) -> None:
        self.client = client

    def _values_url(self, spreadsheet_id: str, range_notation: str) -> str:
        encoded_range = quote(range_notation, safe="!:'")
        return f"{SHEETS_API_BASE}/spreadsheets/{spreadsheet_id}/values/{encoded_range}"

    async def _batch_update(
        self, spreadsheet_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        return await self.client.request(
            "POST",
            f"{SHEETS_API_BASE}/spreadsheets/{spreadsheet_id}:batchUpdate",
            json_data={"requests": requests},
        )

    async def create_spreadsheet(
        self, title: str, sheets: list[SheetSpec] | None = None
    ) -> str:
        """Create a spreadsheet.

        Args:
            title: Spreadsheet title.
            sheets: Initial sheets with optional grid sizes and frozen
                rows/columns. Google adds a single "Sheet1" when omitted.

        Returns:
            The new spreadsheet's ID.
        """
        body: dict[str, Any] = {"properties": {"title": title}}
        if sheets:
            body["sheets"] = [
                {"properties": sheet.model_dump(by_alias=True, exclude_none=True)}
                for sheet in sheets
            ]

        response = await self.client.request(
            "POST", f"{SHEETS_API_BASE}/spreadsheets", json_data=body
        )
        spreadsheet_id: str = response["spreadsheetId"]
        return spreadsheet_id

    async def update_values(
        self,
        spreadsheet_id: str,
        range_notation: str,
        values: list[list[str]],
        major_dimension: str | None = None,
    ) -> dict[str, Any]:
        """Write values, parsed as if typed into the UI (USER_ENTERED).

        Returns:
            The API's update summary (updatedRange, updatedCells, ...).
        """
        body: dict[str, Any] = {"range": range_notation, "values": values}
        if major_dimension:
            body["majorDimension"] = major_dimension

        return await self.client.request(
            "PUT",
            self._values_url(spreadsheet_id, range_notation),
            params={"valueInputOption": "USER_ENTERED"},
            json_data=body,
        )

    async def get_values(
        self,
        spreadsheet_id: str,
        range_notation: str,
        major_dimension: str | None = None,
    ) -> list[list[Any]]:
        """Read values; an empty range yields an empty list."""
        response = await self.client.request(
            "GET",
            self._values_url(spreadsheet_id, range_notation),
            params={"majorDimension": major_dimension},
        )
        values: list[list[Any]] = response.get("values", [])
        return values

    async def format_cells(
        self, spreadsheet_id: str, range_notation: str, cell_format: CellFormat
    ) -> None:
        """Apply a cell format to a range.

        Only the top-level format fields that are set are written, so other
        formatting already on the cells is kept.

        Raises:
            ValueError: If the format sets nothing, or the range is invalid.
        """
        user_entered_format = cell_format.to_api()
        if not user_entered_format:
            raise ValueError("format must set at least one field")

        grid_range = await self._grid_range(spreadsheet_id, range_notation)
        await self._batch_update(
            spreadsheet_id,
            [
                {
                    "repeatCell": {
                        "range": grid_range,
                        "cell": {"userEnteredFormat": user_entered_format},
                        "fields": ",".join(
                            f"userEnteredFormat.{field}" for field in user_entered_format
                        ),
                    }
                }
            ],
        )

    async def merge_cells(
        self, spreadsheet_id: str, range_notation: str, merge_type: str = "MERGE_ALL"
    ) -> None:
        """Merge the cells of a range."""
        grid_range = await self._grid_range(spreadsheet_id, range_notation)
        await self._batch_update(
            spreadsheet_id,
            [{"mergeCells": {"range": grid_range, "mergeType": merge_type}}],
        )

    async def dimension_operation(
        self,
        spreadsheet_id: str,
        sheet_id: int,
        dimension: str,
        start_index: int,
        operation: str,
        end_index: int | None = None,
        size: int | None = None,
    ) -> None:
        """Insert, delete or resize rows or columns.

        Args:
            spreadsheet_id: Spreadsheet ID.
            sheet_id: Numeric sheet ID (not the title).
            dimension: ``ROWS`` or ``COLUMNS``.
            start_index: First index, zero-based.
            operation: ``INSERT``, ``DELETE`` or ``RESIZE``.
            end_index: Exclusive end index. Defaults to ``start_index + 1``.
            size: Pixel size, required for ``RESIZE``.

        Raises:
            ValueError: On an unknown operation or RESIZE without a size.
        """
        dimension_range = {
            "sheetId": sheet_id,
            "dimension": dimension,
            "startIndex": start_index,
            "endIndex": end_index if end_index is not None else start_index + 1,
        }

        if operation == "INSERT":
            # Rows/columns at index 0 have nothing before them to inherit from
            request = {
                "insertDimension": {
                    "range": dimension_range,
                    "inheritFromBefore": start_index > 0,
                }
            }
        elif operation == "DELETE":
            request = {"deleteDimension": {"range": dimension_range}}
        elif operation == "RESIZE":
            if size is None:
                raise ValueError("size is required for RESIZE operations")
            request = {
                "updateDimensionProperties": {
                    "range": dimension_range,
                    "properties": {"pixelSize": size},
                    "fields": "pixelSize",
                }
            }
        else:
            raise ValueError(f"Unsupported dimension operation: {operation}")

        await self._batch_update(spreadsheet_id, [request])

    async def _grid_range(self, spreadsheet_id: str, range_notation: str) -> dict[str, Any]:
        a1_range = parse_a1_range(range_notation)
        sheet_id = await self._resolve_sheet_id(spreadsheet_id, a1_range.sheet_name)
        return a1_range.to_grid_range(sheet_id)

    async def _resolve_sheet_id(self, spreadsheet_id: str, sheet_name: str | None) -> int:
        """Look up a sheet ID by title; None selects the first sheet.

        Raises:
            ValueError: If no sheet has that title.
        """
        response = await self.client.request(
            "GET",
            f"{SHEETS_API_BASE}/spreadsheets/{spreadsheet_id}",
            params={"fields": "sheets.properties(sheetId,title)"},
        )
        sheets = [sheet.get("properties", {}) for sheet in response.get("sheets", [])]
        if not sheets:
            raise ValueError(f"Spreadsheet {spreadsheet_id} has no sheets")

        if sheet_name is None:
            return int(sheets[0].get("sheetId", 0))

        for properties in sheets:
            if properties.get("title") == sheet_name:
                return int(properties.get("sheetId", 0))

        raise ValueError(f"Sheet not found in spreadsheet {spreadsheet_id}: {sheet_name!r}")
