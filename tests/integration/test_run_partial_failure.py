from __future__ import annotations

import json
from pathlib import Path

from storefront_import.cli import main as cli_main

"""End-to-end partial failure: rejected rows become WARN lines and error log records."""


def test_partial_failure_run(temp_workdir: Path, write_config, mock_db, make_xlsx, product_header, capsys):
    rows = [
        product_header,
        ["Mug", "9.99", "Blue", None, "B1", None],
        ["Cup", "n/a", None, None, "B2", None],
        [None, "3", None, None, "B3", None],
        ["Plate", "12", None, "Stoneware", "B4", "https://example.com/p.jpg"],
    ]
    path = temp_workdir / "data" / "products.xlsx"
    path.write_bytes(make_xlsx(rows))

    code = cli_main(["import", str(path)])
    out = capsys.readouterr().out

    assert code == 2
    assert "WARN Row 3: Invalid price format" in out
    assert "WARN Row 4: Missing product name (required)" in out
    assert "SUMMARY rows=4 success=2 failed=2" in out
    assert (
        "Successfully imported 2 products out of 4 rows. "
        "Errors: Row 3: Invalid price format; Row 4: Missing product name (required)"
    ) in out

    logs = list((temp_workdir / "logs").glob("import-errors-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert [(r["row"], r["error_type"]) for r in records] == [
        (3, "INVALID_PRICE"),
        (4, "MISSING_PRODUCT_NAME"),
    ]
    assert all(r["file"] == "products.xlsx" for r in records)


def test_batch_unusable_run_writes_error_log(temp_workdir: Path, write_config, mock_db, make_xlsx, product_header, capsys):
    path = temp_workdir / "data" / "products.xlsx"
    path.write_bytes(make_xlsx([product_header, ["Mug", "9.99", None, None, None, None]]))

    assert cli_main(["import", str(path)]) == 1
    assert "ERROR import: Validation failed: Row 2: Missing barcode (required)" in capsys.readouterr().out

    (log,) = (temp_workdir / "logs").glob("import-errors-*.log")
    types = [json.loads(line)["error_type"] for line in log.read_text(encoding="utf-8").splitlines()]
    assert types == ["MISSING_BARCODE", "BATCH_UNUSABLE"]
