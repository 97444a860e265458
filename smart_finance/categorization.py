"""Keyword-based category detection.

The keyword table is an ordered sequence of ``(keyword, category)`` pairs.
Several keywords overlap (a description such as "Food delivery refund"
contains keywords from two categories), and the first pair in table order
whose keyword occurs in the description wins.  Table order is therefore
part of the behaviour and must not be re-sorted.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from .models import DEFAULT_CATEGORY

KeywordRule = Tuple[str, str]

KEYWORD_RULES: Sequence[KeywordRule] = (
    # Food & Dining
    ('food', 'Food & Dining'),
    ('dining', 'Food & Dining'),
    ('restaurant', 'Food & Dining'),
    ('grocery', 'Food & Dining'),
    ('groceries', 'Food & Dining'),
    ('supermarket', 'Food & Dining'),
    ('cafe', 'Food & Dining'),
    ('coffee', 'Food & Dining'),
    ('lunch', 'Food & Dining'),
    ('dinner', 'Food & Dining'),
    ('breakfast', 'Food & Dining'),
    ('snack', 'Food & Dining'),
    ('takeout', 'Food & Dining'),
    ('delivery', 'Food & Dining'),
    # Shopping
    ('shopping', 'Shopping'),
    ('mall', 'Shopping'),
    ('retail', 'Shopping'),
    ('store', 'Shopping'),
    ('purchase', 'Shopping'),
    ('buy', 'Shopping'),
    ('amazon', 'Shopping'),
    ('online', 'Shopping'),
    ('clothes', 'Shopping'),
    ('clothing', 'Shopping'),
    ('shoes', 'Shopping'),
    ('electronics', 'Shopping'),
    # Transportation
    ('transport', 'Transportation'),
    ('transportation', 'Transportation'),
    ('car', 'Transportation'),
    ('gas', 'Transportation'),
    ('fuel', 'Transportation'),
    ('uber', 'Transportation'),
    ('taxi', 'Transportation'),
    ('bus', 'Transportation'),
    ('train', 'Transportation'),
    ('parking', 'Transportation'),
    ('toll', 'Transportation'),
    ('maintenance', 'Transportation'),
    # Bills & Utilities
    ('bill', 'Bills & Utilities'),
    ('bills', 'Bills & Utilities'),
    ('utility', 'Bills & Utilities'),
    ('utilities', 'Bills & Utilities'),
    ('electric', 'Bills & Utilities'),
    ('electricity', 'Bills & Utilities'),
    ('water', 'Bills & Utilities'),
    ('internet', 'Bills & Utilities'),
    ('phone', 'Bills & Utilities'),
    ('mobile', 'Bills & Utilities'),
    ('rent', 'Bills & Utilities'),
    ('mortgage', 'Bills & Utilities'),
    ('insurance', 'Bills & Utilities'),
    # Entertainment
    ('entertainment', 'Entertainment'),
    ('movie', 'Entertainment'),
    ('cinema', 'Entertainment'),
    ('game', 'Entertainment'),
    ('gaming', 'Entertainment'),
    ('netflix', 'Entertainment'),
    ('spotify', 'Entertainment'),
    ('subscription', 'Entertainment'),
    ('hobby', 'Entertainment'),
    # Health & Medical
    ('health', 'Health & Medical'),
    ('medical', 'Health & Medical'),
    ('doctor', 'Health & Medical'),
    ('hospital', 'Health & Medical'),
    ('pharmacy', 'Health & Medical'),
    ('medicine', 'Health & Medical'),
    ('dental', 'Health & Medical'),
    ('clinic', 'Health & Medical'),
    # Income
    ('salary', 'Income'),
    ('wage', 'Income'),
    ('income', 'Income'),
    ('pay', 'Income'),
    ('paycheck', 'Income'),
    ('bonus', 'Income'),
    ('freelance', 'Income'),
    ('refund', 'Income'),
)

# Exact-label lookup for supplied categories.  Keywords are unique in the
# table, so building a dict loses nothing.
_KEYWORD_INDEX: Dict[str, str] = dict(KEYWORD_RULES)


def classify(description: Optional[str], supplied_category: Optional[str] = None) -> str:
    """Return the category for a transaction description.

    1. A supplied category that, trimmed and lower-cased, equals a keyword is
       mapped through the table ("groceries" -> "Food & Dining").
    2. Otherwise the lower-cased description is scanned against the keyword
       table in order and the first keyword found as a substring decides.
    3. Otherwise the supplied category is returned as given, or ``"Other"``
       when none was supplied.
    """
    supplied = supplied_category if isinstance(supplied_category, str) else None
    if supplied:
        mapped = _KEYWORD_INDEX.get(supplied.strip().lower())
        if mapped:
            return mapped

    text = (description or '').strip().lower()
    if text:
        for keyword, category in KEYWORD_RULES:
            if keyword in text:
                return category

    if supplied and supplied.strip():
        return supplied
    return DEFAULT_CATEGORY
