from __future__ import annotations

import logging
import sys

import pytest

from storefront_import.logging.init import (
    APP_LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    setup_logging,
)


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord("x", level, __file__, 1, msg, None, None)


def test_setup_logging_creates_single_stdout_handler():
    logger = setup_logging()
    assert logger.name == APP_LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert len(second.handlers) == 1


def test_setup_logging_debug_lowers_level_on_existing_logger():
    setup_logging()
    logger = setup_logging(debug=True)
    assert logger.level == logging.DEBUG
    assert logger.handlers[0].level == logging.DEBUG


@pytest.mark.parametrize(
    "level, label",
    [
        (logging.INFO, "INFO"),
        (logging.WARNING, "WARN"),
        (logging.ERROR, "ERROR"),
        (SUMMARY_LEVEL, "SUMMARY"),
        (logging.DEBUG, "DEBUG"),
    ],
)
def test_labeled_formatter_prefixes(level: int, label: str):
    assert LabeledFormatter().format(_record(level, "hello")) == f"{label} hello"


def test_module_loggers_reach_app_handler(capsys):
    setup_logging()
    logging.getLogger("storefront_import.services.importer").warning("Row 3: Invalid price format")
    assert "WARN Row 3: Invalid price format" in capsys.readouterr().out


def test_log_summary_uses_summary_label(capsys):
    get_logger()
    log_summary("rows=3 success=2 failed=1 elapsed_sec=0.5")
    out = capsys.readouterr().out
    assert out.strip() == "SUMMARY rows=3 success=2 failed=1 elapsed_sec=0.5"


def test_labeled_formatter_appends_traceback():
    try:
        raise RuntimeError("connection reset")
    except RuntimeError:
        record = logging.LogRecord("x", logging.DEBUG, __file__, 1, "upsert failed", None, sys.exc_info())
    text = LabeledFormatter().format(record)
    assert text.startswith("DEBUG upsert failed\nTraceback")
    assert "RuntimeError: connection reset" in text
