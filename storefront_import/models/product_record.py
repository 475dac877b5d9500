from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""ProductRecord model: the normalized product produced from a valid row.

Field names are snake_case in Python; ``to_dict`` renders the wire / table
form (camelCase) used by the storefront API and the ``products`` table.
"""

__all__ = [
    "ProductRecord",
]


@dataclass(frozen=True)
class ProductRecord:
    """A validated product ready for upsert (keyed by barcode)."""
    barcode: str  # persistence key
    product_name: str
    price: str  # decimal text as typed in the sheet, e.g. "29.99"
    color: str | None = None
    description: str | None = None
    image_url: str | None = None  # spreadsheet column "productImage"

    def to_dict(self) -> dict[str, Any]:
        """Wire form with camelCase keys; absent optional fields are omitted."""
        data: dict[str, Any] = {
            "barcode": self.barcode,
            "productName": self.product_name,
            "price": self.price,
        }
        if self.color is not None:
            data["color"] = self.color
        if self.description is not None:
            data["description"] = self.description
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> ProductRecord:
        """Build a record from the wire / table form (inverse of ``to_dict``)."""
        return ProductRecord(
            barcode=str(data["barcode"]),
            product_name=str(data["productName"]),
            price=str(data["price"]),
            color=data.get("color"),
            description=data.get("description"),
            image_url=data.get("imageUrl"),
        )
