"""A1-notation parsing for Sheets grid ranges.

Supports the forms the Sheets API itself accepts::

    Sheet1!A1:C10    'My Sheet'!B2    A1:C10    A:C    2:5    A2:C    Sheet1

Row and column bounds are returned zero-based and half-open, the way
``GridRange`` expects them. Unbounded sides are ``None``.
"""

import re
from dataclasses import dataclass
from typing import Any

_ENDPOINT_RE = re.compile(r"^([A-Za-z]{0,3})([0-9]*)$")
_QUOTED_SHEET_RE = re.compile(r"^'((?:[^']|'')+)'!(.*)$")


@dataclass(frozen=True)
class A1Range:
    """A parsed A1 range.

    Attributes:
        sheet_name: Sheet title, or None for the first sheet.
        start_row: First row (inclusive, zero-based).
        end_row: Last row (exclusive).
        start_column: First column (inclusive, zero-based).
        end_column: Last column (exclusive).
    """

    sheet_name: str | None = None
    start_row: int | None = None
    end_row: int | None = None
    start_column: int | None = None
    end_column: int | None = None

    def to_grid_range(self, sheet_id: int) -> dict[str, Any]:
        """Build a Sheets API ``GridRange`` on the given sheet."""
        grid: dict[str, Any] = {"sheetId": sheet_id}
        bounds = {
            "startRowIndex": self.start_row,
            "endRowIndex": self.end_row,
            "startColumnIndex": self.start_column,
            "endColumnIndex": self.end_column,
        }
        grid.update({key: value for key, value in bounds.items() if value is not None})
        return grid


def column_to_index(letters: str) -> int:
    """Convert column letters to a zero-based index ('A' = 0, 'AA' = 26)."""
    index = 0
    for char in letters.upper():
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1


def _parse_endpoint(text: str, notation: str) -> tuple[int | None, int | None]:
    """Parse one side of a range into (column index, row index)."""
    match = _ENDPOINT_RE.match(text)
    if not text or match is None:
        raise ValueError(f"Invalid A1 range: {notation!r}")

    letters, digits = match.groups()
    column = column_to_index(letters) if letters else None
    row = None
    if digits:
        row = int(digits) - 1
        if row < 0:
            raise ValueError(f"Invalid A1 range: {notation!r} (rows start at 1)")
    return column, row


def _is_cell_range(text: str) -> bool:
    return all(part and _ENDPOINT_RE.match(part) for part in text.split(":", 1))


def _ordered(low: int | None, high: int | None) -> tuple[int | None, int | None]:
    if low is not None and high is not None and high < low:
        return high, low
    return low, high


def parse_a1_range(notation: str) -> A1Range:
    """Parse an A1-notation range.

    A bare name that is not a cell reference (``Summary``) selects the whole
    sheet of that name.

    Args:
        notation: A1 range string.

    Returns:
        Parsed A1Range.

    Raises:
        ValueError: If the notation can't be parsed.
    """
    notation = notation.strip()
    sheet_name: str | None = None

    quoted = _QUOTED_SHEET_RE.match(notation)
    if quoted:
        sheet_name = quoted.group(1).replace("''", "'")
        cells = quoted.group(2)
    elif "!" in notation:
        sheet_name, _, cells = notation.partition("!")
    elif _is_cell_range(notation):
        cells = notation
    else:
        if not notation:
            raise ValueError("Invalid A1 range: empty string")
        # A bare sheet title can't hold a cell separator
        if ":" in notation:
            raise ValueError(f"Invalid A1 range: {notation!r}")
        return A1Range(sheet_name=notation.strip("'"))

    if not cells:
        return A1Range(sheet_name=sheet_name)

    start_text, has_end, end_text = cells.partition(":")
    start_column, start_row = _parse_endpoint(start_text, notation)

    if has_end:
        end_column, end_row = _parse_endpoint(end_text, notation)
    else:
        end_column, end_row = start_column, start_row

    # A1:C  keeps C unbounded downwards;  A:C  is whole columns
    start_column, end_column = _ordered(start_column, end_column)
    start_row, end_row = _ordered(start_row, end_row)

    return A1Range(
        sheet_name=sheet_name,
        start_row=start_row,
        end_row=end_row + 1 if end_row is not None else None,
        start_column=start_column,
        end_column=end_column + 1 if end_column is not None else None,
    )
