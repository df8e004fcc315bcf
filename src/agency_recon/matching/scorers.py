"""
Dimension scorers used by the interactive suggestion ranker.

Each scorer compares one aspect of a transaction and a record and
returns a banded score between 0.0 and 1.0. Scorers never raise:
missing or unparseable input scores 0.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .text import jaccard_similarity

# (max relative difference, score), checked in order
AMOUNT_BANDS: tuple[tuple[Decimal, float], ...] = (
    (Decimal("0.02"), 0.95),  # bank fees
    (Decimal("0.05"), 0.7),
    (Decimal("0.10"), 0.3),
)

# (max days apart, score), checked in order
DATE_BANDS: tuple[tuple[int, float], ...] = (
    (0, 1.0),
    (3, 0.9),
    (5, 0.7),
    (7, 0.5),
    (14, 0.3),
)


def to_decimal(value: Any) -> Optional[Decimal]:
    """Coerce a number-like value to Decimal, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def to_date(value: Any) -> Optional[date]:
    """Coerce a date, datetime or ISO string to a date, or None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        text = str(value).strip()
        return datetime.fromisoformat(text[:10]).date() if text else None
    except ValueError:
        return None


def days_between(date1: Any, date2: Any) -> Optional[int]:
    """Absolute number of calendar days between two dates."""
    d1 = to_date(date1)
    d2 = to_date(date2)
    if d1 is None or d2 is None:
        return None
    return abs((d1 - d2).days)


def relative_difference(amount1: Any, amount2: Any) -> Optional[Decimal]:
    """|a - b| / max(|a|, |b|) over absolute values; None if not comparable."""
    a = to_decimal(amount1)
    b = to_decimal(amount2)
    if a is None or b is None:
        return None
    a, b = abs(a), abs(b)
    if a == b:
        return Decimal("0")
    return abs(a - b) / max(a, b)


def amount_score(txn_amount: Any, record_amount: Any) -> float:
    """Score amount closeness; 1.0 for an exact match of absolute values."""
    diff = relative_difference(txn_amount, record_amount)
    if diff is None:
        return 0.0
    if diff == 0:
        return 1.0

    for max_diff, score in AMOUNT_BANDS:
        if diff <= max_diff:
            return score
    return 0.0


def date_score(date1: Any, date2: Any) -> float:
    """Score date proximity; 1.0 for the same day, 0 beyond two weeks."""
    diff_days = days_between(date1, date2)
    if diff_days is None:
        return 0.0

    for max_days, score in DATE_BANDS:
        if diff_days <= max_days:
            return score
    return 0.0


def text_similarity(text1: Optional[str], text2: Optional[str]) -> float:
    """Word-overlap similarity of two names or descriptions."""
    return jaccard_similarity(text1, text2)
