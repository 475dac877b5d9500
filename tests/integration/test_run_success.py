from __future__ import annotations

import base64
import re
from pathlib import Path

from storefront_import.cli import main as cli_main

"""End-to-end: generate the template, import it back through the CLI (mock mode)."""


def test_template_then_import(temp_workdir: Path, write_config, mock_db, capsys):
    tpl = temp_workdir / "data" / "product_template.xlsx"
    assert cli_main(["template", str(tpl)]) == 0

    code = cli_main(["import", str(tpl)])
    out = capsys.readouterr().out

    assert code == 0
    assert "INFO Importing products from:" in out
    assert "INFO mode=mock Successfully imported 2 products out of 2 rows." in out
    assert re.search(r"^SUMMARY rows=2 success=2 failed=0 elapsed_sec=[0-9.]+$", out, re.MULTILINE)
    assert "WARN" not in out
    # nothing failed, so no error log
    assert list((temp_workdir / "logs").iterdir()) == []


def test_import_base64_text_file(temp_workdir: Path, write_config, mock_db, make_xlsx, product_header, capsys):
    encoded = base64.b64encode(make_xlsx([product_header, ["Mug", 4.5, "White", None, 4006381333931, None]]))
    path = temp_workdir / "data" / "upload.txt"
    path.write_text("data:application/vnd.openxmlformats-officedocument.spreadsheetml.sheet;base64,"
                    + encoded.decode("ascii"), encoding="ascii")

    assert cli_main(["import", "--base64", str(path)]) == 0
    assert "SUMMARY rows=1 success=1 failed=0" in capsys.readouterr().out
