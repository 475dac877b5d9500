from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pandas as pd
from dotenv import load_dotenv

from storefront_import.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    ImportConfig,
    default_config,
    load_config,
)
from storefront_import.db.products import (
    InMemoryProductRepository,
    PersistenceError,
    PostgresProductRepository,
    ProductRepository,
)
from storefront_import.excel.reader import DecodeError, decode_payload, decode_rows
from storefront_import.excel.template import TEMPLATE_FILENAME, generate_template
from storefront_import.logging.error_log import ErrorLogBuffer
from storefront_import.logging.init import log_summary, setup_logging
from storefront_import.services.importer import BatchUnusableError, decode_upload, import_rows
from storefront_import.services.summary import render_outcome_message, render_summary_line

"""CLI entrypoint for the product import tool.

Commands:
- import FILE    decode, validate and upsert products; prints WARN lines per
                 rejected row and a SUMMARY line
- template OUT   write the upload template workbook
- inspect FILE   print the decoded header and first rows, then exit
- list           print stored products as JSON lines

Without a reachable database (or with DISABLE_DB_CONNECT=1) products go to an
in-memory store ("mock" mode) so a file can be dry-run.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _resolve_dsn(cfg: ImportConfig) -> str:
    """Connection string, resolved in this order:

    1. DATABASE_URL / PGDSN environment variables (after .env was loaded)
    2. individual PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
    3. the ``database`` section of the config file
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


def _connect(cfg: ImportConfig) -> Any:  # pragma: no cover (needs a live database)
    import psycopg2

    conn = psycopg2.connect(_resolve_dsn(cfg))
    # one statement per product; a failed row must not abort the others
    conn.autocommit = True
    return conn


@contextmanager
def _repository(cfg: ImportConfig, logger: Any) -> Iterator[tuple[ProductRepository, str]]:
    """Yield (repository, mode) where mode is "live" or "mock"."""
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
        yield InMemoryProductRepository(), "mock"
        return
    try:
        conn = _connect(cfg)
    except Exception as db_e:
        if os.getenv("SUPPRESS_DB_WARNING") == "1":
            logger.debug(f"DB connection failed (suppressed warn) -> fallback to mock mode: {db_e}")
        else:
            logger.warning(f"DB connection failed -> fallback to mock mode (nothing is stored): {db_e}")
        yield InMemoryProductRepository(), "mock"
        return
    try:  # pragma: no cover (needs a live database)
        with conn.cursor() as cur:
            yield PostgresProductRepository(cur, table=cfg.products_table), "live"
    finally:  # pragma: no cover
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so its connection values win over the config file."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except Exception as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="storefront-import", description="Product spreadsheet importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import products from an .xlsx file")
    imp.add_argument("file", type=Path)
    imp.add_argument("--base64", action="store_true", help="FILE holds base64 text instead of raw bytes")

    tpl = sub.add_parser("template", help="Write the product upload template")
    tpl.add_argument("out", type=Path, nargs="?", default=Path(TEMPLATE_FILENAME))

    ins = sub.add_parser("inspect", help="Print header and first rows, then exit")
    ins.add_argument("file", type=Path)

    sub.add_parser("list", help="Print stored products as JSON lines")
    return p.parse_args(argv)


def _load_cfg(args: argparse.Namespace) -> ImportConfig:
    if args.config is not None:
        return load_config(args.config)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return default_config()


def _read_payload(path: Path, as_base64: bool) -> bytes | str:
    if as_base64:
        return path.read_text(encoding="ascii").strip()
    return path.read_bytes()


def _cmd_import(args: argparse.Namespace, cfg: ImportConfig, logger: Any) -> int:
    path: Path = args.file
    if not path.is_file():
        logger.error(f"file not found: {path}")
        return EXIT_FATAL
    try:
        payload = _read_payload(path, args.base64)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"read: {e}")
        return EXIT_FATAL

    logger.info(f"Importing products from: {path}")
    error_log = ErrorLogBuffer(Path(cfg.error_log_directory))
    start_time = datetime.now(UTC)
    try:
        # decode before connecting: a corrupt upload never touches the database
        rows = decode_upload(payload, file_name=path.name, error_log=error_log)
        with _repository(cfg, logger) as (repository, mode):
            outcome = import_rows(
                rows, repository, file_name=path.name, error_log=error_log, start_time=start_time
            )
    except DecodeError as e:
        logger.error(f"decode: {e}")
        return EXIT_FATAL
    except BatchUnusableError as e:
        logger.error(f"import: {e}")
        return EXIT_FATAL
    finally:
        try:
            written = error_log.flush()
        except OSError as e:
            logger.warning(f"error log not written: {e}")
        else:
            if written is not None:
                logger.info(f"error log: {written}")

    logger.info(f"mode={mode} {render_outcome_message(outcome)}")
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(render_summary_line(outcome)[len("SUMMARY "):])
    return EXIT_SUCCESS_ALL if outcome.is_complete else EXIT_PARTIAL_FAILURE


def _cmd_template(args: argparse.Namespace, logger: Any) -> int:
    out: Path = args.out
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(generate_template())
    except OSError as e:
        logger.error(f"template: {e}")
        return EXIT_FATAL
    logger.info(f"template written: {out}")
    return EXIT_SUCCESS_ALL


def _cmd_inspect(args: argparse.Namespace) -> int:
    path: Path = args.file
    if not path.is_file():
        print(f"inspect: file not found: {path}")
        return EXIT_FATAL
    try:
        rows = decode_rows(decode_payload(path.read_bytes()))
    except DecodeError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {path.name} rows={len(rows)}")
    if not rows:
        return EXIT_SUCCESS_ALL
    sample = pd.DataFrame(rows[:3])
    print(f"  columns={list(sample.columns)}")
    print(sample.to_string(index=False))
    return EXIT_SUCCESS_ALL


def _cmd_list(cfg: ImportConfig, logger: Any) -> int:
    try:
        with _repository(cfg, logger) as (repository, mode):
            products = repository.list_products()
    except PersistenceError as e:
        logger.error(f"list: {e}")
        return EXIT_FATAL
    for product in products:
        print(json.dumps(product.to_dict(), ensure_ascii=False))
    logger.info(f"mode={mode} products={len(products)}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None (not []) means "read sys.argv": tests call main([...]) explicitly
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    if args.command == "template":
        return _cmd_template(args, logger)
    if args.command == "inspect":
        return _cmd_inspect(args)

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = _load_cfg(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "import":
        return _cmd_import(args, cfg, logger)
    return _cmd_list(cfg, logger)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
