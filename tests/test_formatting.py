"""Unit tests for smart_finance.formatting and smart_finance.models helpers."""

from __future__ import annotations

from smart_finance.formatting import escape_currency_for_markdown, format_currency, month_label
from smart_finance.models import FilterSpec, filter_categories


def test_format_currency() -> None:
    assert format_currency(1234.5, symbol="$") == "$1,234.50"
    assert format_currency(-20, symbol="$") == "-$20.00"
    assert format_currency(20, symbol="$", signed=True) == "+$20.00"
    assert format_currency(0, symbol="$", signed=True) == "$0.00"


def test_escape_currency_for_markdown() -> None:
    assert escape_currency_for_markdown("You spent $20") == "You spent \\$20"


def test_month_label() -> None:
    assert month_label("2025-09") == "Sep 25"
    assert month_label("unknown") == "unknown"


def test_filter_spec_bounds() -> None:
    spec = FilterSpec(amount_min="10.5", amount_max="abc")
    assert spec.min_amount == 10.5
    assert spec.max_amount is None
    assert spec.is_active()
    assert FilterSpec(categories=["Shopping"]).is_active()
    assert not FilterSpec().is_active()


def test_filter_categories_by_type() -> None:
    assert filter_categories("income")[0] == "Income"
    assert "Food & Dining" not in filter_categories("income")
    assert filter_categories("all") == filter_categories("income") + filter_categories("expense")
