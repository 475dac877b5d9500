from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .error_record import ErrorRecord
from .product_record import ProductRecord

"""Result models for a single product import call.

ConversionResult is what validation hands to the persistence loop;
ImportOutcome is what the caller of the whole pipeline receives.
"""

__all__ = [
    "ConversionResult",
    "ImportOutcome",
]


@dataclass(frozen=True)
class ConversionResult:
    """Valid products (with their spreadsheet row numbers) and row errors.

    ``converted`` keeps row order; ``records`` holds one ErrorRecord per
    rejected row, also in row order.
    """
    converted: list[tuple[int, ProductRecord]] = field(default_factory=list)
    records: list[ErrorRecord] = field(default_factory=list)

    @property
    def products(self) -> list[ProductRecord]:
        return [product for _, product in self.converted]

    @property
    def errors(self) -> list[str]:
        return [r.message for r in self.records]


@dataclass(frozen=True)
class ImportOutcome:
    """Summary of one import: rows seen, rows persisted, and every failure reason."""
    success_count: int  # rows upserted
    total_rows: int  # rows decoded, invalid ones included
    errors: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def failed_count(self) -> int:
        return self.total_rows - self.success_count

    @property
    def is_complete(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        """API response form; ``errors`` is omitted when empty."""
        data: dict[str, Any] = {
            "success": True,
            "successCount": self.success_count,
            "totalRows": self.total_rows,
        }
        if self.errors:
            data["errors"] = list(self.errors)
        return data
