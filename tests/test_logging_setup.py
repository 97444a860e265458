"""Tests for smart_finance.logging_setup."""

from __future__ import annotations

import io
import logging

from smart_finance import logging_setup


def test_configure_logging_runs_once(monkeypatch) -> None:
    pkg_logger = logging.getLogger("smart_finance")
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    monkeypatch.setattr(pkg_logger, "handlers", [])
    monkeypatch.setattr(pkg_logger, "level", pkg_logger.level)
    monkeypatch.setattr(pkg_logger, "propagate", pkg_logger.propagate)
    stream = io.StringIO()

    logging_setup.configure_logging("debug", stream=stream)
    logging_setup.configure_logging("error", stream=io.StringIO())
    logging_setup.get_logger("smart_finance.test").debug("hello")

    assert pkg_logger.level == logging.DEBUG
    assert len(pkg_logger.handlers) == 1
    assert "hello" in stream.getvalue()


def test_parse_level() -> None:
    assert logging_setup._parse_level("warning") == logging.WARNING
    assert logging_setup._parse_level("10") == 10
    assert logging_setup._parse_level("nonsense") == logging.INFO
    assert logging_setup._parse_level(logging.ERROR) == logging.ERROR
