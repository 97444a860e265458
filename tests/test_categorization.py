"""Unit tests for smart_finance.categorization."""

from __future__ import annotations

import pytest

from smart_finance.categorization import KEYWORD_RULES, classify


@pytest.mark.parametrize(
    "description, expected",
    [
        ("Starbucks Coffee", "Food & Dining"),
        ("Uber Ride", "Transportation"),
        ("Internet Bill", "Bills & Utilities"),
        ("Netflix Subscription", "Entertainment"),
        ("Pharmacy Medicine", "Health & Medical"),
        ("Monthly Salary", "Income"),
        ("AMAZON MARKETPLACE", "Shopping"),
    ],
)
def test_classify_by_description_keyword(description, expected) -> None:
    assert classify(description) == expected


def test_first_keyword_in_table_order_wins() -> None:
    # "delivery" (Food & Dining) precedes "refund" (Income) in the table.
    assert classify("Food delivery refund") == "Food & Dining"
    # "mall" precedes "parking".
    assert classify("Mall parking") == "Shopping"


def test_classify_is_deterministic() -> None:
    assert classify("Gas station snack", "misc") == classify("Gas station snack", "misc")


def test_supplied_category_matching_a_keyword_is_mapped() -> None:
    assert classify("Weekly run", "groceries") == "Food & Dining"
    assert classify("Weekly run", "  Groceries ") == "Food & Dining"


def test_supplied_category_kept_when_nothing_matches() -> None:
    assert classify("Xyz 123", "Pets") == "Pets"


def test_fallback_is_other() -> None:
    assert classify("Xyz 123") == "Other"
    assert classify("", None) == "Other"
    assert classify(None, "   ") == "Other"


def test_keyword_table_has_unique_lowercase_keywords() -> None:
    keywords = [keyword for keyword, _ in KEYWORD_RULES]
    assert len(keywords) == len(set(keywords))
    assert all(keyword == keyword.lower() for keyword in keywords)
