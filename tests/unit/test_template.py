from __future__ import annotations

import base64
import io

from openpyxl import load_workbook

from storefront_import.excel.template import (
    TEMPLATE_COLUMNS,
    TEMPLATE_SHEET_NAME,
    XLSX_CONTENT_TYPE,
    generate_template,
    generate_template_base64,
)


def test_template_sheet_name_and_header_order():
    wb = load_workbook(io.BytesIO(generate_template()))
    assert wb.sheetnames == [TEMPLATE_SHEET_NAME]
    ws = wb[TEMPLATE_SHEET_NAME]
    header = [c.value for c in ws[1]]
    assert header == ["productName", "price", "color", "description", "barcode", "productImage"]
    assert header == TEMPLATE_COLUMNS


def test_template_has_two_example_rows():
    ws = load_workbook(io.BytesIO(generate_template())).active
    rows = list(ws.iter_rows(min_row=2, values_only=True))
    assert len(rows) == 2
    assert rows[0] == (
        "Sample Product 1",
        "29.99",
        "Red",
        "This is a sample product description",
        "BARCODE001",
        "https://example.com/image1.jpg",
    )
    assert rows[1][4] == "BARCODE002"


def test_template_column_widths():
    ws = load_workbook(io.BytesIO(generate_template())).active
    assert ws.column_dimensions["A"].width == 25
    assert ws.column_dimensions["D"].width == 35
    assert ws.column_dimensions["F"].width == 30


def test_template_base64_matches_content():
    raw = base64.b64decode(generate_template_base64())
    ws = load_workbook(io.BytesIO(raw)).active
    assert ws.title == TEMPLATE_SHEET_NAME


def test_template_is_xlsx_package():
    # .xlsx is a zip container
    assert generate_template()[:2] == b"PK"
    assert XLSX_CONTENT_TYPE == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
