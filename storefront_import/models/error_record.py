from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the import error log.

Every human-readable error string the pipeline reports has a structured twin
here, written as one JSON line per record. ``row`` is the spreadsheet row
number (header row = 1, first data row = 2); -1 marks file-level errors where
no row applies.
"""

__all__ = [
    "ErrorRecord",
    "MISSING_BARCODE",
    "MISSING_PRODUCT_NAME",
    "MISSING_PRICE",
    "INVALID_PRICE",
    "ROW_ERROR",
    "PERSISTENCE_ERROR",
    "DECODE_ERROR",
    "BATCH_UNUSABLE",
]

MISSING_BARCODE = "MISSING_BARCODE"
MISSING_PRODUCT_NAME = "MISSING_PRODUCT_NAME"
MISSING_PRICE = "MISSING_PRICE"
INVALID_PRICE = "INVALID_PRICE"
ROW_ERROR = "ROW_ERROR"  # unexpected exception while converting a row
PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
DECODE_ERROR = "DECODE_ERROR"
BATCH_UNUSABLE = "BATCH_UNUSABLE"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: name of the uploaded workbook
        row: spreadsheet row number. Use -1 for file-level errors
        error_type: error classification in UPPER_SNAKE_CASE format
        message: the exact string reported back to the caller
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
