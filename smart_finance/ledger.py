"""In-memory transaction ledger.

The ledger is the only mutable state in a session.  Records are kept in
insertion order and identified by integer ids drawn from a counter that
never goes backwards, so an id is never handed out twice even after
deletes or a full replace.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from .logging_setup import get_logger
from .models import ENTRY_TYPES, EXPENSE, Transaction

logger = get_logger(__name__)

SAMPLE_TRANSACTIONS: List[Dict[str, Any]] = [
    {'id': 1, 'category': 'Food & Dining', 'amount': 450, 'date': '2025-09-05', 'description': 'Starbucks Coffee', 'type': 'expense'},
    {'id': 2, 'category': 'Transportation', 'amount': 120, 'date': '2025-09-06', 'description': 'Uber Ride', 'type': 'expense'},
    {'id': 3, 'category': 'Shopping', 'amount': 320, 'date': '2025-09-04', 'description': 'Amazon Purchase', 'type': 'expense'},
    {'id': 4, 'category': 'Bills & Utilities', 'amount': 85, 'date': '2025-09-03', 'description': 'Internet Bill', 'type': 'expense'},
    {'id': 5, 'category': 'Income', 'amount': 5000, 'date': '2025-09-01', 'description': 'Monthly Salary', 'type': 'income'},
    {'id': 6, 'category': 'Food & Dining', 'amount': 35.75, 'date': '2025-09-07', 'description': 'Dinner at Restaurant', 'type': 'expense'},
    {'id': 7, 'category': 'Transportation', 'amount': 65, 'date': '2025-09-08', 'description': 'Gas Station Fill Up', 'type': 'expense'},
    {'id': 8, 'category': 'Entertainment', 'amount': 15.99, 'date': '2025-09-09', 'description': 'Netflix Subscription', 'type': 'expense'},
    {'id': 9, 'category': 'Income', 'amount': 800, 'date': '2025-09-07', 'description': 'Freelance Project Payment', 'type': 'income'},
    {'id': 10, 'category': 'Health & Medical', 'amount': 22.50, 'date': '2025-09-08', 'description': 'Pharmacy Medicine', 'type': 'expense'},
    {'id': 11, 'category': 'Shopping', 'amount': 89.99, 'date': '2025-09-06', 'description': 'Mall Purchase - Uniqlo', 'type': 'expense'},
    {'id': 12, 'category': 'Bills & Utilities', 'amount': 125.40, 'date': '2025-09-05', 'description': 'Electricity Bill', 'type': 'expense'},
    {'id': 13, 'category': 'Food & Dining', 'amount': 285.75, 'date': '2025-09-02', 'description': 'Grocery Shopping', 'type': 'expense'},
    {'id': 14, 'category': 'Entertainment', 'amount': 24.00, 'date': '2025-09-07', 'description': 'Movie Tickets', 'type': 'expense'},
    {'id': 15, 'category': 'Transportation', 'amount': 350.00, 'date': '2025-09-11', 'description': 'Car Maintenance', 'type': 'expense'},
]


def validate_entry(entry: Mapping[str, Any]) -> List[str]:
    """Check a manual-entry form submission.

    Returns a list of human-readable issues; an empty list means the entry
    can be turned into a transaction.
    """
    issues: List[str] = []
    if not str(entry.get('description') or '').strip():
        issues.append('Description is required.')
    if not str(entry.get('category') or '').strip():
        issues.append('Category is required.')

    raw_amount = entry.get('amount')
    if raw_amount is None or (isinstance(raw_amount, str) and not raw_amount.strip()):
        issues.append('Amount is required.')
    else:
        amount = _to_amount(raw_amount)
        if amount is None or amount <= 0:
            issues.append('Amount must be a number greater than zero.')

    if entry.get('type', EXPENSE) not in ENTRY_TYPES:
        issues.append(f"Type must be one of: {', '.join(ENTRY_TYPES)}.")

    raw_date = entry.get('date')
    if raw_date and _to_iso_date(raw_date) is None:
        issues.append('Date must be in YYYY-MM-DD format.')
    return issues


def _to_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    return amount if math.isfinite(amount) else None


def _to_iso_date(value: Any) -> Optional[str]:
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value).strip()).isoformat()
    except ValueError:
        return None


class Ledger:
    """Ordered, in-memory collection of transactions."""

    def __init__(self, transactions: Optional[Iterable[Transaction]] = None):
        records = list(transactions or [])
        self._items: List[Transaction] = []
        self._next_id = max([t.id for t in records] + [0]) + 1
        seen = set()
        for txn in records:
            if txn.id in seen or txn.id < 1:
                new_txn = txn.with_id(self._allocate_id())
                logger.warning("Duplicate or invalid id %d re-keyed to %d", txn.id, new_txn.id)
                txn = new_txn
            seen.add(txn.id)
            self._items.append(txn)

    @classmethod
    def with_examples(cls) -> 'Ledger':
        """Ledger pre-seeded with the example records shown on first load."""
        return cls(Transaction(**row) for row in SAMPLE_TRANSACTIONS)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._items))

    def snapshot(self) -> List[Transaction]:
        """Copy of the current records, safe to hand to other components."""
        return list(self._items)

    def get(self, transaction_id: int) -> Optional[Transaction]:
        return next((t for t in self._items if t.id == transaction_id), None)

    def categories(self) -> List[str]:
        return sorted({t.category for t in self._items})

    def _allocate_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def _build(self, transaction_id: int, entry: Mapping[str, Any]) -> Transaction:
        return Transaction(
            id=transaction_id,
            date=_to_iso_date(entry.get('date')) or date.today().isoformat(),
            description=str(entry['description']).strip(),
            amount=float(entry['amount']),
            category=str(entry['category']).strip(),
            type=entry.get('type', EXPENSE),
        )

    def add(self, entry: Mapping[str, Any]) -> Optional[Transaction]:
        """Create a transaction from a form entry.

        Returns ``None`` (and leaves the ledger unchanged) when the entry
        fails :func:`validate_entry`.
        """
        issues = validate_entry(entry)
        if issues:
            logger.info("Transaction not added: %s", ' '.join(issues))
            return None
        txn = self._build(self._allocate_id(), entry)
        self._items.append(txn)
        logger.debug("Added transaction %d", txn.id)
        return txn

    def update(self, transaction_id: int, entry: Mapping[str, Any]) -> bool:
        """Replace every field of an existing transaction, keeping its id."""
        issues = validate_entry(entry)
        if issues:
            logger.info("Transaction %d not updated: %s", transaction_id, ' '.join(issues))
            return False
        for index, existing in enumerate(self._items):
            if existing.id == transaction_id:
                self._items[index] = self._build(transaction_id, entry)
                logger.debug("Updated transaction %d", transaction_id)
                return True
        return False

    def delete(self, transaction_id: int) -> bool:
        original_count = len(self._items)
        self._items = [t for t in self._items if t.id != transaction_id]
        if len(self._items) < original_count:
            logger.debug("Deleted transaction %d", transaction_id)
            return True
        return False

    def merge(self, records: Iterable[Transaction]) -> List[Transaction]:
        """Append imported records under fresh ids and return them."""
        added = [record.with_id(self._allocate_id()) for record in records]
        self._items.extend(added)
        return added

    def replace(self, records: Iterable[Transaction]) -> List[Transaction]:
        """Swap the whole ledger for ``records``; ids keep counting upward."""
        self._items = []
        return self.merge(records)
