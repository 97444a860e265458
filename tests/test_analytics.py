"""Unit tests for smart_finance.analytics."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from smart_finance import analytics
from smart_finance.ledger import Ledger
from smart_finance.models import FilterSpec, Transaction

NOW = date(2025, 9, 12)


def _txn(id, day, amount, category="Food & Dining", type="expense", description="item"):
    return Transaction(id=id, date=day, description=description, amount=amount, category=category, type=type)


def test_period_window_excludes_older_records() -> None:
    old = _txn(1, (NOW - timedelta(days=40)).isoformat(), 10.0)

    assert analytics.compute_view([old], "30d", now=NOW).filtered == []
    assert analytics.compute_view([old], "all", now=NOW).filtered == [old]


def test_period_start_bounds() -> None:
    assert analytics.period_start("7d", NOW) == "2025-09-05"
    assert analytics.period_start("1y", NOW) == "2024-09-12"
    assert analytics.period_start("all", NOW) is None


def test_unknown_period_falls_back_to_30_days() -> None:
    assert analytics.period_start("fortnight", NOW) == analytics.period_start("30d", NOW)
    view = analytics.compute_view([], "fortnight", now=NOW)
    assert view.period == "30d"


def test_period_bound_is_inclusive() -> None:
    edge = _txn(1, "2025-08-13", 5.0)
    assert analytics.apply_period([edge], "30d", NOW) == [edge]


def test_filtered_list_is_newest_first_with_stable_ties() -> None:
    records = [
        _txn(1, "2025-09-01", 1.0),
        _txn(2, "2025-09-05", 2.0),
        _txn(3, "2025-09-05", 3.0),
        _txn(4, "2025-09-03", 4.0),
    ]
    view = analytics.compute_view(records, "all", now=NOW)
    assert [t.id for t in view.filtered] == [2, 3, 4, 1]


def test_filters_combine() -> None:
    records = [
        _txn(1, "2025-09-01", 100.0),
        _txn(2, "2025-09-05", 50.0, category="Shopping"),
        _txn(3, "2025-09-06", 500.0, category="Income", type="income"),
        _txn(4, "2025-09-10", 20.0),
    ]
    spec = FilterSpec(
        date_start="2025-09-01",
        date_end="2025-09-09",
        categories=["Food & Dining", "Shopping"],
        amount_min="30",
        amount_max=100,
        type="expense",
    )
    result = analytics.apply_filters(records, spec)
    assert [t.id for t in result] == [1, 2]


def test_blank_filter_fields_mean_no_constraint() -> None:
    records = [_txn(1, "2025-09-01", 100.0)]
    spec = FilterSpec(amount_min="", amount_max="  ", date_start=None)
    assert not spec.is_active()
    assert analytics.apply_filters(records, spec) == records


def test_totals_are_consistent() -> None:
    records = [
        _txn(1, "2025-09-01", 1000.0, category="Income", type="income"),
        _txn(2, "2025-09-02", 250.0),
        _txn(3, "2025-09-03", 150.0, category="Shopping"),
    ]
    totals = analytics.compute_totals(records, savings_rate=0.2)

    assert totals["income"] == 1000.0
    assert totals["expenses"] == 400.0
    assert totals["balance"] == totals["income"] - totals["expenses"]
    assert totals["estimated_savings"] == pytest.approx(120.0)


def test_estimated_savings_floors_at_zero() -> None:
    totals = analytics.compute_totals([_txn(1, "2025-09-01", 80.0)])
    assert totals["balance"] == -80.0
    assert totals["estimated_savings"] == 0.0


def test_empty_set_yields_zeros() -> None:
    view = analytics.compute_view([], "all", now=NOW)

    assert view.filtered == []
    assert view.totals == {"income": 0.0, "expenses": 0.0, "balance": 0.0, "estimated_savings": 0.0}
    assert view.category_breakdown == []
    assert view.monthly_series == []


def test_category_breakdown_sums_per_category() -> None:
    records = [
        _txn(1, "2025-09-01", 100.0),
        _txn(2, "2025-09-02", 50.0),
        _txn(3, "2025-09-03", 999.0, category="Income", type="income"),
    ]
    assert analytics.category_breakdown(records) == [{"category": "Food & Dining", "total": 150.0}]


def test_category_breakdown_keeps_first_seen_order() -> None:
    records = [
        _txn(1, "2025-09-01", 5.0, category="Shopping"),
        _txn(2, "2025-09-02", 50.0),
        _txn(3, "2025-09-03", 7.0, category="Shopping"),
    ]
    breakdown = analytics.category_breakdown(records)
    assert [item["category"] for item in breakdown] == ["Shopping", "Food & Dining"]
    assert analytics.top_categories(breakdown, n=1) == [{"category": "Food & Dining", "total": 50.0}]


def test_monthly_series_running_balance_excludes_savings() -> None:
    records = [
        _txn(1, "2025-09-03", 300.0),
        _txn(2, "2025-08-01", 1000.0, category="Income", type="income"),
        _txn(3, "2025-08-15", 200.0),
        _txn(4, "2025-08-20", 400.0, category="Savings", type="savings"),
        _txn(5, "2025-09-01", 500.0, category="Income", type="income"),
    ]
    series = analytics.monthly_series(records)

    assert [row["month"] for row in series] == ["2025-08", "2025-09"]
    assert series[0]["label"] == "Aug 25"
    assert series[0]["net"] == 800.0
    assert series[0]["savings"] == 400.0
    assert series[0]["running_balance"] == 800.0
    assert series[1]["net"] == 200.0
    assert series[1]["running_balance"] == 1000.0


def test_monthly_series_covers_whole_ledger() -> None:
    old = _txn(1, "2024-01-10", 20.0)
    view = analytics.compute_view([old], "7d", now=NOW)
    assert view.filtered == []
    assert [row["month"] for row in view.monthly_series] == ["2024-01"]


def test_totals_scope_all_uses_every_record() -> None:
    ledger = Ledger.with_examples()
    spec = FilterSpec(type="expense")

    filtered_view = analytics.compute_view(ledger, "all", spec, now=NOW)
    all_view = analytics.compute_view(ledger, "all", spec, now=NOW, totals_scope="all")

    assert filtered_view.totals["income"] == 0.0
    assert all_view.totals["income"] == 5800.0
    assert filtered_view.totals["expenses"] == all_view.totals["expenses"]


def test_invalid_totals_scope() -> None:
    with pytest.raises(ValueError):
        analytics.compute_view([], totals_scope="visible")


def test_compute_view_does_not_mutate_input() -> None:
    ledger = Ledger.with_examples()
    before = ledger.snapshot()
    analytics.compute_view(ledger, "all", FilterSpec(categories=["Shopping"]), now=NOW)
    assert ledger.snapshot() == before
