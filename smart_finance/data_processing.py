"""Data ingestion helpers.

This module turns uploaded CSV files into canonical
:class:`~smart_finance.models.Transaction` records.  Reading is delegated to
pandas; everything after that works on plain row mappings so the same
normalizer serves uploaded files, pasted rows and tests.

Normalization is lenient at the row level: unparseable dates
become today's date and unknown categories fall back to ``"Other"``.  The
only rows dropped are those without a usable, non-zero amount.  Problems
with the file as a whole (no data, required columns missing) abort the
import and are reported as a list of messages rather than raised.
"""

from __future__ import annotations

import csv
import io
import math
import re
import warnings
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .categorization import classify
from .errors import UnsupportedFileError
from .logging_setup import get_logger
from .models import EXPENSE, INCOME, Transaction

logger = get_logger(__name__)

REQUIRED_FIELDS = ('date', 'description', 'amount')

# Aliases are compared after header normalisation, so "Transaction Date",
# "transaction_date" and "TRANSACTION-DATE" are all the same alias.
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    'date': ('date', 'transaction_date', 'trans_date', 'posting_date', 'post_date'),
    'description': ('description', 'desc', 'transaction', 'memo', 'details'),
    'amount': ('amount', 'value', 'sum', 'total', 'price'),
    'category': ('category', 'cat'),
    'type': ('type', 'transaction_type', 'trans_type'),
}

INCOME_TYPE_MARKERS = ('income', 'credit', 'deposit')
INCOME_DESCRIPTION_KEYWORDS = ('salary', 'income', 'refund', 'payment received')

CSV_ENCODINGS = ('utf-8', 'utf-8-sig', 'latin-1', 'cp1252')
EXCEL_EXTENSIONS = ('.xlsx', '.xls')

_CURRENCY_NOISE = re.compile(r'[₱$€£¥,\s]')
_ISO_DATE = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})$')
_SLASH_DATE = re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})$')
_MONTH_FIRST = re.compile(r'^([A-Za-z]+)\.?\s+(\d{1,2}),?\s+(\d{4})$')
_DAY_FIRST = re.compile(r'^(\d{1,2})\s+([A-Za-z]+)\.?,?\s+(\d{4})$')

MONTHS: Dict[str, int] = {
    'january': 1, 'jan': 1,
    'february': 2, 'feb': 2,
    'march': 3, 'mar': 3,
    'april': 4, 'apr': 4,
    'may': 5,
    'june': 6, 'jun': 6,
    'july': 7, 'jul': 7,
    'august': 8, 'aug': 8,
    'september': 9, 'sep': 9, 'sept': 9,
    'october': 10, 'oct': 10,
    'november': 11, 'nov': 11,
    'december': 12, 'dec': 12,
}


@dataclass
class ImportResult:
    """Outcome of normalizing one file: records or file-level errors, never both."""
    records: List[Transaction] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    dropped: int = 0
    source_name: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.errors and bool(self.records)

    @property
    def message(self) -> str:
        return '\n'.join(self.errors)


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


def read_file(path_or_buffer) -> List[Dict[str, Any]]:
    """Load a CSV file into a list of row mappings (header row required).

    Accepts a filesystem path or a file-like object such as a Streamlit
    upload.  All cells are read as strings and blank lines are skipped.
    Excel workbooks are rejected with :class:`UnsupportedFileError`; I/O
    errors propagate unchanged.
    """
    if hasattr(path_or_buffer, 'read'):
        name = str(getattr(path_or_buffer, 'name', 'uploaded_file.csv'))
        _check_extension(name, allow_blank=True)
        payload = path_or_buffer.read()
    else:
        path = Path(path_or_buffer)
        _check_extension(path.name, allow_blank=True)
        payload = path.read_bytes()

    text = _decode(payload) if isinstance(payload, bytes) else str(payload)
    if not text.strip():
        return []

    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always', pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
            )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as exc:
        raise UnsupportedFileError(f"Error reading CSV file: {exc}") from exc

    if any(issubclass(w.category, pd.errors.ParserWarning) for w in caught):
        ragged = count_ragged_rows(text, len(df.columns))
        logger.warning(
            "%d rows have more fields than the %d header columns; extra fields were dropped",
            ragged, len(df.columns),
        )

    df.columns = [str(col).strip() for col in df.columns]
    return df.to_dict(orient='records')


def count_ragged_rows(text: str, width: int) -> int:
    """Number of CSV records in ``text`` with more than ``width`` fields."""
    return sum(1 for row in csv.reader(io.StringIO(text)) if len(row) > width)


def _check_extension(name: str, allow_blank: bool = False) -> None:
    ext = Path(name).suffix.lower()
    if ext in EXCEL_EXTENSIONS:
        raise UnsupportedFileError(
            "Excel workbooks are not supported. Please save the sheet as CSV and upload that instead."
        )
    if ext in {'.csv', '.txt'} or (allow_blank and not ext):
        return
    raise UnsupportedFileError(f"Unsupported file extension '{ext}'. Please upload a CSV file.")


def _decode(payload: bytes) -> str:
    for encoding in CSV_ENCODINGS:
        try:
            return payload.decode(encoding)
        except UnicodeDecodeError:
            continue
    # latin-1 accepts any byte sequence, so this is only reached if the
    # encoding list changes.
    return payload.decode('utf-8', errors='replace')


# ---------------------------------------------------------------------------
# Column resolution
# ---------------------------------------------------------------------------


def _normalise_header(name: Any) -> str:
    """Normalise a header for comparison (lowercase alphanumerics only)."""
    return ''.join(ch for ch in str(name).lower() if ch.isalnum())


def collect_columns(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Column names in first-seen order across all rows."""
    seen: Dict[str, None] = {}
    for row in rows:
        for key in row.keys():
            seen.setdefault(str(key), None)
    return list(seen)


def resolve_columns(columns: Sequence[str]) -> Dict[str, str]:
    """Map each semantic field to the first matching source column.

    Aliases are tried in order; for each alias the first column whose
    normalised header matches wins.
    """
    normalised = [(_normalise_header(col), col) for col in columns]
    mapping: Dict[str, str] = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            key = _normalise_header(alias)
            found = next((col for norm, col in normalised if norm == key), None)
            if found is not None:
                mapping[field_name] = found
                break
    return mapping


def validate_columns(rows: Sequence[Mapping[str, Any]]) -> Tuple[Dict[str, str], List[str]]:
    """File-level validation performed once before any row is processed."""
    if not rows:
        return {}, ['File is empty or contains no data']

    columns = collect_columns(rows)
    mapping = resolve_columns(columns)
    missing = [name for name in REQUIRED_FIELDS if name not in mapping]
    if missing:
        return mapping, [
            f"Missing required columns: {', '.join(missing)}",
            f"Available columns: {', '.join(columns)}",
            'Please ensure your CSV has columns for: date, description, and amount',
        ]

    has_data = any(
        _cell(row, mapping['description']) is not None and _cell(row, mapping['amount']) is not None
        for row in rows
    )
    if not has_data:
        return mapping, [
            'No valid transaction data found. Please check that your CSV contains transaction information.'
        ]
    return mapping, []


def _cell(row: Mapping[str, Any], column: Optional[str]) -> Optional[str]:
    if column is None:
        return None
    value = row.get(column)
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------


def parse_amount(value: Any) -> Optional[float]:
    """Parse a signed amount, ignoring currency symbols and thousands separators."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = _CURRENCY_NOISE.sub('', str(value))
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def parse_date(value: Any, today: Optional[date] = None) -> str:
    """Return an ISO ``YYYY-MM-DD`` date, substituting today when unparseable.

    Formats are tried in order: ISO, month/day/year with a 2- or 4-digit
    year, "December 15, 2024", "15 Dec 2024", then a generic pandas parse.
    """
    fallback = (today or date.today()).isoformat()
    if value is None:
        return fallback
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = str(value).strip()
    if not text:
        return fallback

    for parser in (_parse_iso, _parse_slashed, _parse_month_name):
        parsed = parser(text)
        if parsed is not None:
            return parsed.isoformat()

    parsed = _parse_generic(text)
    if parsed is not None:
        return parsed.isoformat()
    return fallback


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_iso(text: str) -> Optional[date]:
    match = _ISO_DATE.match(text)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    return _safe_date(year, month, day)


def _parse_slashed(text: str) -> Optional[date]:
    match = _SLASH_DATE.match(text)
    if not match:
        return None
    month, day, year = (int(part) for part in match.groups())
    if len(match.group(3)) == 2:
        year += 2000
    return _safe_date(year, month, day)


def _parse_month_name(text: str) -> Optional[date]:
    match = _MONTH_FIRST.match(text)
    if match:
        month_name, day, year = match.groups()
    else:
        match = _DAY_FIRST.match(text)
        if not match:
            return None
        day, month_name, year = match.groups()
    month = MONTHS.get(month_name.lower())
    if month is None:
        return None
    return _safe_date(int(year), month, int(day))


def _parse_generic(text: str) -> Optional[date]:
    with warnings.catch_warnings():
        warnings.simplefilter('ignore')
        try:
            parsed = pd.to_datetime(text, errors='coerce')
        except (ValueError, TypeError, OverflowError):
            return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.date()


def detect_type(raw_type: Optional[str], signed_amount: Optional[float], description: str) -> str:
    """Classify a row as income or expense.

    An explicit type value decides on its own.  Without one, a positive
    amount whose description reads like income is treated as income.
    """
    if raw_type:
        lowered = raw_type.lower()
        if any(marker in lowered for marker in INCOME_TYPE_MARKERS):
            return INCOME
        return EXPENSE
    if signed_amount is not None and signed_amount > 0:
        lowered = description.lower()
        if any(keyword in lowered for keyword in INCOME_DESCRIPTION_KEYWORDS):
            return INCOME
    return EXPENSE


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_rows(
    rows: Sequence[Mapping[str, Any]],
    today: Optional[date] = None,
) -> Tuple[List[Transaction], List[str]]:
    """Convert raw rows into transactions.

    Returns ``(records, errors)``.  A file-level failure yields no records
    and one or more messages; otherwise ``errors`` is empty.  Record ids are
    the 1-based row positions and are re-keyed when merged into a ledger.
    """
    rows = list(rows)
    mapping, errors = validate_columns(rows)
    if errors:
        logger.warning("Import rejected: %s", errors[0])
        return [], errors

    records: List[Transaction] = []
    today = today or date.today()
    for index, row in enumerate(rows, start=1):
        signed = parse_amount(_cell(row, mapping['amount']))
        if signed is None or signed == 0:
            continue

        description = _cell(row, mapping['description']) or f"Transaction {index}"
        supplied_category = _cell(row, mapping.get('category'))
        records.append(
            Transaction(
                id=index,
                date=parse_date(_cell(row, mapping['date']), today=today),
                description=description,
                amount=abs(signed),
                category=classify(description, supplied_category),
                type=detect_type(_cell(row, mapping.get('type')), signed, description),
            )
        )

    dropped = len(rows) - len(records)
    if dropped:
        logger.info("Dropped %d rows without a usable amount", dropped)
    return records, []


def import_file(
    source,
    ledger=None,
    replace: bool = False,
    today: Optional[date] = None,
) -> ImportResult:
    """Read and normalize a CSV file, optionally loading it into a ledger.

    The ledger is touched only when the whole file normalized cleanly and
    produced at least one record.  ``replace=True`` swaps the ledger
    contents for the imported records; the default merges them.
    """
    name = str(getattr(source, 'name', source))
    rows = read_file(source)
    records, errors = normalize_rows(rows, today=today)
    if not errors and not records:
        errors = ['No valid transactions found in the file']

    result = ImportResult(
        records=records,
        errors=errors,
        dropped=len(rows) - len(records) if not errors else 0,
        source_name=name,
    )
    if not result.ok:
        return result

    if ledger is not None:
        if replace:
            result.records = ledger.replace(records)
        else:
            result.records = ledger.merge(records)
    logger.info(
        "Imported %d transactions from %s (%d rows dropped)",
        len(result.records), name, result.dropped,
    )
    return result
