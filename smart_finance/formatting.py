"""Formatting utilities for currency and month display."""

from __future__ import annotations

from datetime import date
from typing import Optional, Union

from . import config


def format_currency(amount: Union[float, int], symbol: Optional[str] = None, signed: bool = False) -> str:
    """Format a currency amount with thousands separators.

    Example:
        >>> format_currency(1234.5, symbol='$')
        '$1,234.50'
        >>> format_currency(-20, symbol='$', signed=True)
        '-$20.00'
    """
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    formatted = f"{symbol}{abs(amount):,.2f}"
    if amount < 0:
        return f"-{formatted}"
    if signed and amount > 0:
        return f"+{formatted}"
    return formatted


def escape_currency_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown doesn't read them as LaTeX."""
    return text.replace("$", "\\$")


def month_label(month_key: str) -> str:
    """Turn a ``YYYY-MM`` key into a short chart label such as ``Sep 25``."""
    try:
        year, month = (int(part) for part in month_key.split("-")[:2])
        return date(year, month, 1).strftime("%b %y")
    except ValueError:
        return month_key
