from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence

from ..models.error_record import (
    INVALID_PRICE,
    MISSING_BARCODE,
    MISSING_PRICE,
    MISSING_PRODUCT_NAME,
    ROW_ERROR,
    ErrorRecord,
)
from ..models.import_outcome import ConversionResult
from ..models.product_record import ProductRecord
from ..models.row_data import RawRow, cell_to_text, is_blank, row_number

"""Row validation and conversion for product uploads.

Each row is checked in a fixed order (barcode, product name, price presence,
price format); the first failing check rejects the row with exactly one error
string and processing moves on to the next row. Nothing here raises for a bad
row: every problem, including unexpected exceptions, ends up as a
"Row N: ..." entry.
"""

__all__ = [
    "COL_BARCODE",
    "COL_PRODUCT_NAME",
    "COL_PRICE",
    "COL_COLOR",
    "COL_DESCRIPTION",
    "COL_PRODUCT_IMAGE",
    "is_valid_price",
    "validate_and_convert",
]

logger = logging.getLogger(__name__)

COL_BARCODE = "barcode"
COL_PRODUCT_NAME = "productName"
COL_PRICE = "price"
COL_COLOR = "color"
COL_DESCRIPTION = "description"
COL_PRODUCT_IMAGE = "productImage"  # stored as ProductRecord.image_url

_PRICE_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def is_valid_price(text: str) -> bool:
    """True when ``text`` is a plain decimal number with a finite value."""
    if not _PRICE_PATTERN.fullmatch(text):
        return False
    return math.isfinite(float(text))


def _check_row(row: RawRow) -> tuple[str, str] | None:
    """Return (error_type, reason) for the first failing check, or None."""
    if is_blank(row, COL_BARCODE):
        return MISSING_BARCODE, "Missing barcode (required)"
    if is_blank(row, COL_PRODUCT_NAME):
        return MISSING_PRODUCT_NAME, "Missing product name (required)"
    # presence only: a blank price is a format problem, not a missing one
    if COL_PRICE not in row:
        return MISSING_PRICE, "Missing price (required)"
    if not is_valid_price(cell_to_text(row[COL_PRICE])):
        return INVALID_PRICE, "Invalid price format"
    return None


def _optional_text(row: RawRow, column: str) -> str | None:
    if column not in row:
        return None
    text = cell_to_text(row[column])
    return text or None


def _to_product(row: RawRow) -> ProductRecord:
    return ProductRecord(
        barcode=cell_to_text(row[COL_BARCODE]),
        product_name=cell_to_text(row[COL_PRODUCT_NAME]),
        price=cell_to_text(row[COL_PRICE]),
        color=_optional_text(row, COL_COLOR),
        description=_optional_text(row, COL_DESCRIPTION),
        image_url=_optional_text(row, COL_PRODUCT_IMAGE),
    )


def validate_and_convert(rows: Sequence[RawRow], file_name: str = "<upload>") -> ConversionResult:
    """Validate decoded rows and convert the valid ones to ProductRecords.

    Args:
        rows: decoded rows in worksheet order
        file_name: workbook name recorded on each ErrorRecord

    Returns:
        ConversionResult with (row number, product) pairs and one ErrorRecord
        per rejected row, both in row order
    """
    converted: list[tuple[int, ProductRecord]] = []
    records: list[ErrorRecord] = []

    for index, row in enumerate(rows):
        n = row_number(index)
        try:
            failure = _check_row(row)
            if failure is not None:
                error_type, reason = failure
                records.append(ErrorRecord.create(file_name, n, error_type, f"Row {n}: {reason}"))
                continue
            converted.append((n, _to_product(row)))
        except Exception as e:
            # malformed input must never abort the batch
            reason = str(e) or type(e).__name__
            records.append(ErrorRecord.create(file_name, n, ROW_ERROR, f"Row {n}: {reason}"))

    logger.debug("validated rows=%d valid=%d invalid=%d", len(rows), len(converted), len(records))
    return ConversionResult(converted=converted, records=records)
