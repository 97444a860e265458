"""Unit tests for smart_finance.export."""

from __future__ import annotations

import io
from datetime import date

from smart_finance.data_processing import read_file
from smart_finance.export import export_csv, export_filename, write_export
from smart_finance.models import Transaction


def _records():
    return [
        Transaction(id=1, date="2025-09-07", description="Dinner at Restaurant", amount=35.75, category="Food & Dining"),
        Transaction(id=2, date="2025-09-06", description='Mall, "Uniqlo"', amount=50.0, category="Shopping"),
        Transaction(id=3, date="2025-09-01", description="Monthly Salary", amount=5000, category="Income", type="income"),
    ]


def test_export_csv_layout() -> None:
    lines = export_csv(_records()).split("\n")

    assert lines[0] == "Date,Description,Amount,Category,Type"
    assert lines[1] == "2025-09-07,Dinner at Restaurant,35.75,Food & Dining,expense"
    assert lines[2] == '2025-09-06,"Mall, ""Uniqlo""",50,Shopping,expense'
    assert lines[3] == "2025-09-01,Monthly Salary,5000,Income,income"


def test_export_of_empty_list_is_header_only() -> None:
    assert export_csv([]) == "Date,Description,Amount,Category,Type"


def test_export_filename() -> None:
    assert export_filename(date(2025, 9, 12)) == "transactions-2025-09-12.csv"


def test_write_export(tmp_path) -> None:
    path = write_export(_records(), directory=tmp_path / "exports", today=date(2025, 9, 12))

    assert path == tmp_path / "exports" / "transactions-2025-09-12.csv"
    assert path.read_text(encoding="utf-8") == export_csv(_records())


def test_export_reads_back_with_awkward_fields() -> None:
    records = [
        Transaction(id=1, date="2025-09-01", description="Rent\nSeptember", amount=1200.0, category="Bills & Utilities"),
        Transaction(id=2, date="2025-09-02", description="Hardware store", amount=18.5, category="Misc, household"),
    ]
    text = export_csv(records)

    rows = read_file(io.BytesIO(text.encode("utf-8")))

    assert rows == [
        {"Date": "2025-09-01", "Description": "Rent\nSeptember", "Amount": "1200",
         "Category": "Bills & Utilities", "Type": "expense"},
        {"Date": "2025-09-02", "Description": "Hardware store", "Amount": "18.5",
         "Category": "Misc, household", "Type": "expense"},
    ]
