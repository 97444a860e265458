"""Filtering and aggregation for the dashboard.

Every function here is a pure computation over a list of transactions: the
dashboard simply calls :func:`compute_view` again after any change to the
ledger, the period selector or the filter panel.

Conventions:

* The period window is rolling ("the last 30 days"), not calendar aligned.
* The filtered list is ordered newest first; records sharing a date keep
  their ledger order.
* Totals and the category breakdown follow the filtered list by default.
  ``totals_scope="all"`` computes them from the whole ledger instead.
* The monthly cash-flow series always covers the whole ledger and is built
  in ascending date order so that the running balance accumulates
  correctly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

from . import config
from .formatting import month_label
from .logging_setup import get_logger
from .models import EXPENSE, INCOME, SAVINGS, FilterSpec, Transaction

logger = get_logger(__name__)

PERIOD_DAYS: Dict[str, Optional[int]] = {
    '7d': 7,
    '30d': 30,
    '90d': 90,
    '1y': 365,
    'all': None,
}
FALLBACK_PERIOD = '30d'
TOTALS_SCOPES = ('filtered', 'all')

FRAME_COLUMNS = ['id', 'date', 'description', 'amount', 'category', 'type']


@dataclass
class DashboardView:
    """Everything the presentation layer needs for one render."""
    filtered: List[Transaction]
    totals: Dict[str, float]
    category_breakdown: List[Dict[str, Any]]
    monthly_series: List[Dict[str, Any]]
    period: str = FALLBACK_PERIOD
    filters: FilterSpec = field(default_factory=FilterSpec)


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def period_start(period: str, now: Optional[Union[date, datetime]] = None) -> Optional[str]:
    """ISO lower bound for a period selector, or ``None`` for ``"all"``."""
    if period not in PERIOD_DAYS:
        logger.warning("Unknown period %r; using %s", period, FALLBACK_PERIOD)
        period = FALLBACK_PERIOD
    days = PERIOD_DAYS[period]
    if days is None:
        return None
    now = now or datetime.now()
    today = now.date() if isinstance(now, datetime) else now
    return (today - timedelta(days=days)).isoformat()


def apply_period(
    transactions: Iterable[Transaction],
    period: str,
    now: Optional[Union[date, datetime]] = None,
) -> List[Transaction]:
    bound = period_start(period, now)
    if bound is None:
        return list(transactions)
    return [t for t in transactions if t.date >= bound]


def apply_filters(transactions: Iterable[Transaction], spec: Optional[FilterSpec]) -> List[Transaction]:
    """Apply every active predicate of ``spec`` (all must hold)."""
    result = list(transactions)
    if spec is None:
        return result

    if spec.type and spec.type != 'all':
        result = [t for t in result if t.type == spec.type]
    if spec.categories:
        wanted = set(spec.categories)
        result = [t for t in result if t.category in wanted]
    if spec.date_start:
        result = [t for t in result if t.date >= spec.date_start]
    if spec.date_end:
        result = [t for t in result if t.date <= spec.date_end]

    low, high = spec.min_amount, spec.max_amount
    if low is not None:
        result = [t for t in result if t.amount >= low]
    if high is not None:
        result = [t for t in result if t.amount <= high]
    return result


def sort_newest_first(transactions: Iterable[Transaction]) -> List[Transaction]:
    # sorted() is stable with reverse=True, so same-day records keep ledger order.
    return sorted(transactions, key=lambda t: t.date, reverse=True)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Tabular view of transactions, one row per record in the given order."""
    rows = [t.to_dict() for t in transactions]
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS).astype({'amount': float})
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df['amount'] = df['amount'].astype(float)
    return df


def compute_totals(transactions: Iterable[Transaction], savings_rate: Optional[float] = None) -> Dict[str, float]:
    """Income, expenses, balance and the estimated-savings heuristic.

    ``estimated_savings`` is ``savings_rate`` of the balance, floored at
    zero.  It is a rule of thumb, not a real account figure.
    """
    rate = config.SAVINGS_RATE if savings_rate is None else savings_rate
    df = to_frame(transactions)
    income = float(df.loc[df['type'] == INCOME, 'amount'].sum())
    expenses = float(df.loc[df['type'] == EXPENSE, 'amount'].sum())
    balance = income - expenses
    return {
        'income': income,
        'expenses': expenses,
        'balance': balance,
        'estimated_savings': max(0.0, balance * rate),
    }


def category_breakdown(transactions: Iterable[Transaction]) -> List[Dict[str, Any]]:
    """Sum expense amounts per category.

    Entries appear in the order each category is first seen; chart colours
    are assigned by position downstream.
    """
    df = to_frame(transactions)
    expenses = df[df['type'] == EXPENSE]
    if expenses.empty:
        return []
    grouped = expenses.groupby('category', sort=False)['amount'].sum()
    return [{'category': category, 'total': float(total)} for category, total in grouped.items()]


def top_categories(breakdown: List[Dict[str, Any]], n: int = 3) -> List[Dict[str, Any]]:
    return sorted(breakdown, key=lambda item: item['total'], reverse=True)[:n]


def monthly_series(transactions: Iterable[Transaction]) -> List[Dict[str, Any]]:
    """Month-bucketed cash flow with a running balance.

    Savings-typed records are reported in their own column and do not move
    the running balance.
    """
    df = to_frame(transactions)
    if df.empty:
        return []

    df = df.sort_values('date', kind='mergesort')
    df['month'] = df['date'].str[:7]
    pivot = df.pivot_table(index='month', columns='type', values='amount', aggfunc='sum', fill_value=0.0)
    for column in (INCOME, EXPENSE, SAVINGS):
        if column not in pivot.columns:
            pivot[column] = 0.0
    pivot = pivot.sort_index()
    pivot['net'] = pivot[INCOME] - pivot[EXPENSE]
    pivot['running_balance'] = pivot['net'].cumsum()

    series: List[Dict[str, Any]] = []
    for month, row in pivot.iterrows():
        series.append({
            'month': month,
            'label': month_label(month),
            'income': float(row[INCOME]),
            'expenses': float(row[EXPENSE]),
            'savings': float(row[SAVINGS]),
            'net': float(row['net']),
            'running_balance': float(row['running_balance']),
        })
    return series


def compute_view(
    ledger: Iterable[Transaction],
    period: str = FALLBACK_PERIOD,
    filters: Optional[FilterSpec] = None,
    now: Optional[Union[date, datetime]] = None,
    totals_scope: str = 'filtered',
    savings_rate: Optional[float] = None,
) -> DashboardView:
    """Derive the filtered list, totals, breakdown and monthly series."""
    if totals_scope not in TOTALS_SCOPES:
        raise ValueError(f"totals_scope must be one of {TOTALS_SCOPES}, got {totals_scope!r}")

    records = list(ledger)
    filters = filters or FilterSpec()
    filtered = sort_newest_first(apply_filters(apply_period(records, period, now), filters))

    summary_source = filtered if totals_scope == 'filtered' else records
    return DashboardView(
        filtered=filtered,
        totals=compute_totals(summary_source, savings_rate),
        category_breakdown=category_breakdown(summary_source),
        monthly_series=monthly_series(records),
        period=period if period in PERIOD_DAYS else FALLBACK_PERIOD,
        filters=filters,
    )
