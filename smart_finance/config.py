"""Configuration management for the finance dashboard.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

# Base project root - assumes this file is in smart_finance/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


# Data directories
DATA_DIR = Path(os.getenv("SMART_FINANCE_DATA_DIR", _PROJECT_ROOT / "data"))
EXPORT_DIR = Path(os.getenv("SMART_FINANCE_EXPORT_DIR", DATA_DIR / "exports"))

# Dashboard defaults
PAGE_SIZE = _env_int("SMART_FINANCE_PAGE_SIZE", 6)
DEFAULT_PERIOD = os.getenv("SMART_FINANCE_DEFAULT_PERIOD", "30d")
SAVINGS_RATE = _env_float("SMART_FINANCE_SAVINGS_RATE", 0.20)
CURRENCY_SYMBOL = os.getenv("SMART_FINANCE_CURRENCY", "₱")

# Hosted question answering
LLM_MODEL = os.getenv("SMART_FINANCE_LLM_MODEL", "gpt-4o-mini")
LLM_BASE_URL: Optional[str] = os.getenv("SMART_FINANCE_LLM_BASE_URL") or None
LLM_TIMEOUT = _env_float("SMART_FINANCE_LLM_TIMEOUT", 30.0)
LLM_MAX_TOKENS = _env_int("SMART_FINANCE_LLM_MAX_TOKENS", 200)

LOG_LEVEL = os.getenv("SMART_FINANCE_LOG_LEVEL", "INFO")


def ensure_export_dir(directory: Optional[Path] = None) -> Path:
    """Create the export directory if it doesn't exist."""
    target = Path(directory) if directory is not None else EXPORT_DIR
    target.mkdir(parents=True, exist_ok=True)
    return target


def get_llm_api_key() -> Optional[str]:
    """Read the API key at call time so tests and sessions can set it late."""
    return os.getenv("OPENAI_API_KEY") or None
