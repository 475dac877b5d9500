from __future__ import annotations

import base64
import binascii
import io
import logging
from collections.abc import Iterable
from datetime import date, datetime, time
from typing import Any

from openpyxl import load_workbook

from ..models.row_data import CellValue, RawRow, cell_to_text

"""Spreadsheet decoder for product uploads.

The first row of the first worksheet is the header; every later row becomes a
RawRow keyed by header text. Blank cells are left out of the row entirely
(absent key), which is why the workbook is read through openpyxl directly:
pandas' openpyxl engine turns empty cells into "" and the distinction is lost.

Decoding is all-or-nothing: any failure raises DecodeError and no rows are
returned.
"""

__all__ = [
    "DecodeError",
    "decode_payload",
    "decode_rows",
]

logger = logging.getLogger(__name__)


class DecodeError(Exception):
    """Raised when the payload cannot be read as a workbook or has no worksheet."""


def decode_payload(data: bytes | bytearray | str) -> bytes:
    """Return raw workbook bytes from raw bytes or base64 text.

    Base64 text may carry a ``data:...;base64,`` prefix as produced by a
    browser FileReader.
    """
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    text = data.strip()
    if text.startswith("data:") and "," in text:
        text = text.split(",", 1)[1]
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"invalid base64 payload: {e}") from e


def _convert_cell(value: Any) -> CellValue | None:
    if value is None:
        return None
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float, str)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _header_keys(header: Iterable[Any]) -> list[str | None]:
    """Header cell texts; blank headers map to None, repeats get _1, _2 ..."""
    keys: list[str | None] = []
    seen: dict[str, int] = {}
    for cell in header:
        value = _convert_cell(cell)
        if value is None or cell_to_text(value) == "":
            keys.append(None)
            continue
        name = cell_to_text(value)
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        keys.append(name)
    return keys


def decode_rows(payload: bytes) -> list[RawRow]:
    """Decode workbook bytes into raw rows (first worksheet only).

    Raises:
        DecodeError: payload is not a readable workbook, or it has no worksheet
    """
    try:
        wb = load_workbook(io.BytesIO(payload), read_only=True, data_only=True)
    except Exception as e:
        raise DecodeError(f"failed to parse workbook: {e}") from e

    try:
        if not wb.worksheets:
            raise DecodeError("no sheets found in workbook")
        ws = wb.worksheets[0]
        try:
            values = ws.iter_rows(values_only=True)
            # header is the first used row; leading blank rows are layout, not data
            header = next((r for r in values if any(c is not None for c in r)), None)
            if header is None:
                logger.debug("sheet=%s is empty", ws.title)
                return []
            keys = _header_keys(header)
            rows: list[RawRow] = []
            for raw in values:
                row: RawRow = {}
                for key, cell in zip(keys, raw):
                    if key is None:
                        continue
                    value = _convert_cell(cell)
                    if value is not None:
                        row[key] = value
                # fully blank rows are not data
                if row:
                    rows.append(row)
        except Exception as e:
            raise DecodeError(f"failed to read sheet '{ws.title}': {e}") from e
    finally:
        wb.close()

    logger.debug("sheet=%s columns=%s rows=%d", ws.title, [k for k in keys if k], len(rows))
    return rows
