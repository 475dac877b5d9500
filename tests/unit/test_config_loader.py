from __future__ import annotations

from pathlib import Path

import pytest

from storefront_import.config.loader import (
    DEFAULT_ERROR_LOG_DIRECTORY,
    DEFAULT_PRODUCTS_TABLE,
    ConfigError,
    default_config,
    load_config,
)


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.products_table == "products"
    assert cfg.error_log_directory == "./logs"
    assert cfg.database.host == "localhost"
    assert cfg.database.port == 5432
    assert cfg.database.database == "storefront"
    assert cfg.database.dsn is None


def test_load_config_applies_defaults(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("database:\n  dsn: postgresql://localhost/shop\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.products_table == DEFAULT_PRODUCTS_TABLE
    assert cfg.error_log_directory == DEFAULT_ERROR_LOG_DIRECTORY
    assert cfg.database.dsn == "postgresql://localhost/shop"


def test_load_config_empty_file_uses_defaults(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("", encoding="utf-8")
    cfg = load_config(path)
    assert cfg == default_config()


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_load_config_invalid_yaml(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("products_table: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(path)


def test_load_config_root_must_be_mapping(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("- products\n- logs\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="must be a mapping"):
        load_config(path)


@pytest.mark.parametrize(
    "body",
    [
        "unknown_key: 1\n",
        "products_table: \"drop table; --\"\n",
        "error_log_directory: \"\"\n",
        "database:\n  port: 70000\n",
        "database:\n  sslmode: require\n",
    ],
)
def test_load_config_schema_violations(temp_workdir: Path, body: str):
    path = temp_workdir / "config" / "import.yml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(path)


def test_default_config_has_no_connection_values():
    cfg = default_config()
    assert cfg.products_table == "products"
    assert cfg.database.host is None
    assert cfg.database.dsn is None
