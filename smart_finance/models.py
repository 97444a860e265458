"""Core record types shared by the import, ledger and analytics layers.

``Transaction`` is the canonical, strictly typed record.  Loosely typed
input (CSV rows, form submissions) is converted into it at the boundary by
:mod:`smart_finance.data_processing` and :mod:`smart_finance.ledger`, and
nothing downstream ever sees the raw mappings.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence

INCOME = 'income'
EXPENSE = 'expense'
SAVINGS = 'savings'

TRANSACTION_TYPES = (INCOME, EXPENSE, SAVINGS)
ENTRY_TYPES = (INCOME, EXPENSE)
FILTER_TYPES = ('all', INCOME, EXPENSE)

DEFAULT_CATEGORY = 'Other'

INCOME_CATEGORIES: List[str] = [
    'Salary',
    'Freelance',
    'Business',
    'Investment',
    'Gift',
    'Refund',
    'Other Income',
]

EXPENSE_CATEGORIES: List[str] = [
    'Food & Dining',
    'Transportation',
    'Shopping',
    'Bills & Utilities',
    'Entertainment',
    'Health & Medical',
    'Education',
    'Other',
]

# "Income" is what the keyword classifier assigns to salary-like descriptions.
CATEGORIES: List[str] = ['Income'] + INCOME_CATEGORIES + EXPENSE_CATEGORIES


@dataclass
class Transaction:
    """A single ledger entry.

    ``amount`` is always a positive magnitude; direction is carried by
    ``type``.  ``date`` is an ISO ``YYYY-MM-DD`` string so that plain string
    comparison orders records chronologically.
    """
    id: int
    date: str
    description: str
    amount: float
    category: str = DEFAULT_CATEGORY
    type: str = EXPENSE

    def with_id(self, new_id: int) -> 'Transaction':
        return replace(self, id=new_id)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FilterSpec:
    """Secondary filter applied after the period window.

    Blank strings, ``None`` and an empty category list all mean "no
    constraint" for that dimension.  Amount bounds may be given as numbers or
    as the raw strings typed into a form.
    """
    date_start: Optional[str] = None
    date_end: Optional[str] = None
    categories: Sequence[str] = field(default_factory=list)
    amount_min: Any = None
    amount_max: Any = None
    type: str = 'all'

    def is_active(self) -> bool:
        return bool(
            self.categories
            or self.type != 'all'
            or self.date_start
            or self.date_end
            or _coerce_bound(self.amount_min) is not None
            or _coerce_bound(self.amount_max) is not None
        )

    @property
    def min_amount(self) -> Optional[float]:
        return _coerce_bound(self.amount_min)

    @property
    def max_amount(self) -> Optional[float]:
        return _coerce_bound(self.amount_max)


def _coerce_bound(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def filter_categories(transaction_type: str = 'all') -> List[str]:
    """Category choices offered by the filter panel for a type selection."""
    income = ['Income'] + [c for c in INCOME_CATEGORIES if c != 'Other Income']
    expense = [c for c in EXPENSE_CATEGORIES if c != 'Education']
    if transaction_type == INCOME:
        return income
    if transaction_type == EXPENSE:
        return expense
    return income + expense
