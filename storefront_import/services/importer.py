from __future__ import annotations

import logging
from datetime import UTC, datetime

from ..db.products import PersistenceError, ProductRepository
from ..excel.reader import DecodeError, decode_payload, decode_rows
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import BATCH_UNUSABLE, DECODE_ERROR, PERSISTENCE_ERROR, ErrorRecord
from ..models.import_outcome import ImportOutcome
from ..models.product_record import ProductRecord
from ..models.row_data import RawRow
from .progress import ProgressTracker
from .validation import validate_and_convert

"""Product import driver: decode -> validate/convert -> upsert row by row.

Failure semantics:
- DecodeError: the payload is not a usable workbook; nothing is imported.
- BatchUnusableError: no row was valid and at least one row was rejected.
- Everything else (rejected rows, failed upserts) is reported in
  ImportOutcome.errors and never stops the remaining rows.

Upserts are sequential in row order with no transaction spanning rows, so a
partial import leaves every successful row committed.
"""

__all__ = [
    "BatchUnusableError",
    "DecodeError",
    "ProductImportError",
    "decode_upload",
    "import_products",
    "import_rows",
    "persist_products",
]

logger = logging.getLogger(__name__)


class ProductImportError(Exception):
    """Base exception for imports that fail as a whole."""


class BatchUnusableError(ProductImportError):
    """Raised when the file contained no valid row at all."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


def _error_message(e: Exception) -> str:
    return str(e) or type(e).__name__


def persist_products(
    converted: list[tuple[int, ProductRecord]],
    repository: ProductRepository,
    file_name: str = "<upload>",
) -> tuple[int, list[ErrorRecord]]:
    """Upsert products one at a time, in order.

    Args:
        converted: (row number, ProductRecord) pairs from validation
        repository: persistence collaborator
        file_name: workbook name recorded on each ErrorRecord

    Returns:
        (number of successful upserts, one ErrorRecord per failed upsert)
    """
    success_count = 0
    failures: list[ErrorRecord] = []
    with ProgressTracker(len(converted)) as progress:
        for row, product in converted:
            try:
                repository.upsert_product(product)
                success_count += 1
            except Exception as e:
                if not isinstance(e, PersistenceError):
                    logger.debug("unexpected upsert failure row=%d", row, exc_info=True)
                message = f"Failed to insert product {product.barcode}: {_error_message(e)}"
                failures.append(ErrorRecord.create(file_name, row, PERSISTENCE_ERROR, message))
            progress.advance()
            progress.set_postfix(success=success_count, failed=len(failures))
    return success_count, failures


def decode_upload(
    payload: bytes | str,
    *,
    file_name: str = "<upload>",
    error_log: ErrorLogBuffer | None = None,
) -> list[RawRow]:
    """Decode an upload (raw bytes or base64 text) into raw rows.

    Raises:
        DecodeError: payload is not a readable workbook; recorded in
            ``error_log`` before it propagates
    """
    try:
        return decode_rows(decode_payload(payload))
    except DecodeError as e:
        if error_log is not None:
            error_log.append(ErrorRecord.create(file_name, -1, DECODE_ERROR, str(e)))
        logger.error("file=%s decode failed: %s", file_name, e)
        raise


def import_products(
    payload: bytes | str,
    repository: ProductRepository,
    *,
    file_name: str = "<upload>",
    error_log: ErrorLogBuffer | None = None,
) -> ImportOutcome:
    """Import products from a workbook payload (raw bytes or base64 text).

    Args:
        payload: the uploaded workbook
        repository: persistence collaborator providing upsert_product
        file_name: workbook name used in logs
        error_log: optional buffer receiving one ErrorRecord per error; the
            caller owns flushing it

    Returns:
        ImportOutcome with success/total counts and every error string

    Raises:
        DecodeError: payload is not a readable workbook
        BatchUnusableError: no valid rows and at least one rejected row
    """
    start_time = datetime.now(UTC)
    rows = decode_upload(payload, file_name=file_name, error_log=error_log)
    return import_rows(rows, repository, file_name=file_name, error_log=error_log, start_time=start_time)


def import_rows(
    rows: list[RawRow],
    repository: ProductRepository,
    *,
    file_name: str = "<upload>",
    error_log: ErrorLogBuffer | None = None,
    start_time: datetime | None = None,
) -> ImportOutcome:
    """Validate already decoded rows and upsert the valid ones.

    Same outcome and errors as import_products minus decoding; lets a caller
    decode before acquiring a database connection.
    """
    if start_time is None:
        start_time = datetime.now(UTC)

    conversion = validate_and_convert(rows, file_name=file_name)
    if error_log is not None:
        error_log.extend(conversion.records)
    for record in conversion.records:
        logger.warning(record.message)

    if not conversion.converted and conversion.records:
        error = BatchUnusableError(conversion.errors)
        if error_log is not None:
            error_log.append(ErrorRecord.create(file_name, -1, BATCH_UNUSABLE, str(error)))
        logger.error("file=%s has no valid rows (rejected=%d)", file_name, len(conversion.records))
        raise error

    success_count, failures = persist_products(conversion.converted, repository, file_name)
    if error_log is not None:
        error_log.extend(failures)
    for record in failures:
        logger.warning(record.message)

    elapsed = (datetime.now(UTC) - start_time).total_seconds()
    outcome = ImportOutcome(
        success_count=success_count,
        total_rows=len(rows),
        errors=conversion.errors + [r.message for r in failures],
        elapsed_seconds=elapsed,
    )
    logger.info(
        "file=%s imported %d/%d rows errors=%d",
        file_name,
        outcome.success_count,
        outcome.total_rows,
        len(outcome.errors),
    )
    return outcome
