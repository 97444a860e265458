"""CSV export of the currently filtered transactions."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from . import config
from .logging_setup import get_logger
from .models import Transaction

logger = get_logger(__name__)

EXPORT_HEADER = ['Date', 'Description', 'Amount', 'Category', 'Type']


def _format_amount(amount: float) -> str:
    # 50.0 -> "50", 35.75 -> "35.75"
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def export_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Transactions laid out with the export header, amounts pre-formatted."""
    rows = [
        [txn.date, txn.description, _format_amount(txn.amount), txn.category, txn.type]
        for txn in transactions
    ]
    return pd.DataFrame(rows, columns=EXPORT_HEADER)


def export_csv(transactions: Iterable[Transaction]) -> str:
    """Render transactions as CSV text with a fixed header row.

    Fields are quoted only when they contain a comma, a double quote or a
    line break; embedded quotes are doubled.  There is no trailing newline.
    """
    text = export_frame(transactions).to_csv(index=False, lineterminator='\n')
    return text[:-1] if text.endswith('\n') else text


def export_filename(today: Optional[date] = None) -> str:
    return f"transactions-{(today or date.today()).isoformat()}.csv"


def write_export(
    transactions: Iterable[Transaction],
    directory: Optional[Path] = None,
    today: Optional[date] = None,
) -> Path:
    """Write the export file and return its path."""
    rows = list(transactions)
    target = config.ensure_export_dir(directory) / export_filename(today)
    with target.open('w', encoding='utf-8', newline='') as handle:
        handle.write(export_csv(rows))
    logger.info("Exported %d transactions to %s", len(rows), target)
    return target
