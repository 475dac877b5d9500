from __future__ import annotations

import base64
import io

import pandas as pd
from openpyxl.utils import get_column_letter

"""Template workbook generator for product uploads.

The template carries the exact column contract the decoder expects. Note the
image column is named ``productImage`` in the sheet while the stored field is
``imageUrl``; both sides keep that naming.
"""

__all__ = [
    "TEMPLATE_COLUMNS",
    "TEMPLATE_ROWS",
    "TEMPLATE_SHEET_NAME",
    "TEMPLATE_FILENAME",
    "XLSX_CONTENT_TYPE",
    "generate_template",
    "generate_template_base64",
]

TEMPLATE_SHEET_NAME = "Products"
TEMPLATE_FILENAME = "product_template.xlsx"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# column order and header text are part of the upload contract
TEMPLATE_COLUMNS = ["productName", "price", "color", "description", "barcode", "productImage"]
COLUMN_WIDTHS = {
    "productName": 25,
    "price": 12,
    "color": 15,
    "description": 35,
    "barcode": 15,
    "productImage": 30,
}

# prices are text so "29.99" survives the round trip unchanged
TEMPLATE_ROWS = [
    {
        "productName": "Sample Product 1",
        "price": "29.99",
        "color": "Red",
        "description": "This is a sample product description",
        "barcode": "BARCODE001",
        "productImage": "https://example.com/image1.jpg",
    },
    {
        "productName": "Sample Product 2",
        "price": "49.99",
        "color": "Blue",
        "description": "Another sample product",
        "barcode": "BARCODE002",
        "productImage": "https://example.com/image2.jpg",
    },
]


def generate_template() -> bytes:
    """Build the product import template and return the .xlsx bytes."""
    df = pd.DataFrame(TEMPLATE_ROWS, columns=TEMPLATE_COLUMNS)
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=TEMPLATE_SHEET_NAME, index=False)
        ws = writer.sheets[TEMPLATE_SHEET_NAME]
        for idx, column in enumerate(TEMPLATE_COLUMNS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = COLUMN_WIDTHS[column]
    return buf.getvalue()


def generate_template_base64() -> str:
    """Template bytes as base64 text, the form the admin API hands to the browser."""
    return base64.b64encode(generate_template()).decode("ascii")
