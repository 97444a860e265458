"""Tests for environment-driven configuration helpers."""

from __future__ import annotations

from smart_finance import config


def test_env_numbers_fall_back_on_bad_values(monkeypatch) -> None:
    monkeypatch.setenv("SMART_FINANCE_PAGE_SIZE", "zero")
    monkeypatch.setenv("SMART_FINANCE_SAVINGS_RATE", "0.3")
    assert config._env_int("SMART_FINANCE_PAGE_SIZE", 6) == 6
    assert config._env_float("SMART_FINANCE_SAVINGS_RATE", 0.2) == 0.3

    monkeypatch.setenv("SMART_FINANCE_PAGE_SIZE", "-4")
    assert config._env_int("SMART_FINANCE_PAGE_SIZE", 6) == 6


def test_api_key_is_read_at_call_time(monkeypatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert config.get_llm_api_key() is None
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    assert config.get_llm_api_key() == "sk-test"


def test_ensure_export_dir(tmp_path) -> None:
    target = config.ensure_export_dir(tmp_path / "a" / "b")
    assert target.is_dir()
