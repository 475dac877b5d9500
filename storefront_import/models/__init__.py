"""Domain models for the storefront product import.

Raw rows come out of the spreadsheet decoder, ProductRecord is what gets
persisted, and ImportOutcome / ErrorRecord describe how an import went.
"""

from .error_record import ErrorRecord
from .import_outcome import ConversionResult, ImportOutcome
from .product_record import ProductRecord
from .row_data import CellValue, RawRow

__all__ = [
    # Row input
    "CellValue",
    "RawRow",
    # Products
    "ProductRecord",
    # Results
    "ConversionResult",
    "ErrorRecord",
    "ImportOutcome",
]
