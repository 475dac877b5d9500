from __future__ import annotations

from typing import Union

"""Raw row model for the product spreadsheet import.

A raw row is what the decoder hands to validation: column header -> cell value,
one mapping per worksheet data row. Cell values are a closed union of text and
number. A blank cell is never stored as ``None``; it is simply not a key, so
validation can tell "column missing" apart from "column given but empty".
"""

__all__ = [
    "CellValue",
    "RawRow",
    "cell_to_text",
    "is_blank",
    "row_number",
]

CellValue = Union[str, int, float]
RawRow = dict[str, CellValue]

# header row + 1-based data offset
ROW_NUMBER_OFFSET = 2


def row_number(index: int) -> int:
    """Spreadsheet row number for the zero-based data row ``index``."""
    return index + ROW_NUMBER_OFFSET


def cell_to_text(value: CellValue) -> str:
    """Coerce a cell value to trimmed text.

    Integral floats render without the trailing ``.0`` so a barcode typed as
    a number (``12345``) comes back as ``"12345"``.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value)).strip()
    return str(value).strip()


def is_blank(row: RawRow, column: str) -> bool:
    """True when ``column`` is absent or only whitespace."""
    if column not in row:
        return True
    return cell_to_text(row[column]) == ""
