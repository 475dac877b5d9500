# Shared pytest fixtures
from __future__ import annotations
import io
import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from storefront_import.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """products_table: products
error_log_directory: ./logs
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: storefront
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def mock_db(monkeypatch) -> None:
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")


def build_xlsx(sheets: dict[str, list[list[object]]]) -> bytes:
    """Workbook bytes; each sheet is a list of rows, the first one being the header."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            df = pd.DataFrame(rows, dtype=object)
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return buf.getvalue()


@pytest.fixture()
def make_xlsx() -> Callable[..., bytes]:
    """Build a single-sheet workbook from header + data rows."""
    def _make(rows: list[list[object]], sheet: str = "Products") -> bytes:
        return build_xlsx({sheet: rows})
    return _make


@pytest.fixture()
def make_workbook() -> Callable[[dict[str, list[list[object]]]], bytes]:
    """Build a multi-sheet workbook (sheet name -> rows)."""
    return build_xlsx


@pytest.fixture()
def product_header() -> list[str]:
    return ["productName", "price", "color", "description", "barcode", "productImage"]
