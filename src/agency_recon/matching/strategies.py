"""
Scoring strategies for transaction-to-record reconciliation.

Two policies encode the same intuition (amount first, then date, then
names) on different scales:

* NormalizedWeightedStrategy: 0.0-1.0 weighted average over the
  dimensions the record has data for. Drives interactive suggestions.
* AdditivePointStrategy: fixed 0-100 point scale. Drives the batch
  reconciler's auto-confirm decisions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from ..models.records import BankTransaction, MatchableRecord
from .scorers import (
    amount_score,
    date_score,
    days_between,
    text_similarity,
    to_decimal,
)


@dataclass
class ScoreBreakdown:
    """Composite score for one transaction/record pair."""

    score: float
    reasons: list[str] = field(default_factory=list)

    # Per-dimension contribution, keyed by dimension name
    dimensions: dict[str, float] = field(default_factory=dict)


class ScoringStrategy(ABC):
    """Abstract base class for scoring strategies."""

    # Upper bound of the strategy's scale
    max_score: float = 1.0

    @abstractmethod
    def score(
        self, transaction: BankTransaction, record: MatchableRecord
    ) -> Optional[ScoreBreakdown]:
        """
        Score how well a record explains a transaction.

        Args:
            transaction: Bank transaction
            record: Candidate record

        Returns:
            Score breakdown, or None if the record cannot match at all
        """
        pass


def _days_reason(diff_days: int) -> str:
    # Value dates often lag the booking date by a day
    if diff_days <= 1:
        return "same date"
    return f"±{diff_days} days"


class NormalizedWeightedStrategy(ScoringStrategy):
    """
    Weighted average of amount, date and text scores.

    Amount is mandatory: records without an amount, or whose amount score
    is 0, are not candidates. Date and text only count towards the
    denominator when they score above 0, so a record with no date, a
    distant date or an unrelated name is not penalised for it.
    """

    max_score = 1.0

    def __init__(
        self,
        amount_weight: float = 0.40,
        date_weight: float = 0.35,
        text_weight: float = 0.25,
    ):
        """
        Initialize with dimension weights.

        Args:
            amount_weight: Weight of the amount dimension
            date_weight: Weight of the date dimension
            text_weight: Weight of the vendor/description dimension
        """
        if min(amount_weight, date_weight, text_weight) < 0 or amount_weight <= 0:
            raise ValueError("weights must be non-negative and amount weight positive")
        self.amount_weight = amount_weight
        self.date_weight = date_weight
        self.text_weight = text_weight

    def score(
        self, transaction: BankTransaction, record: MatchableRecord
    ) -> Optional[ScoreBreakdown]:
        """Weighted score normalized over the dimensions that scored."""
        record_amount = to_decimal(record.amount)
        if not record_amount:
            return None

        amount = amount_score(transaction.amount, record_amount)
        if amount == 0:
            return None

        reasons: list[str] = []
        dimensions = {"amount": amount}
        total = amount * self.amount_weight
        weight_sum = self.amount_weight

        if amount == 1:
            reasons.append("exact amount")
        elif amount >= 0.95:
            reasons.append("amount ±2% (bank fees)")
        elif amount >= 0.7:
            reasons.append("amount ±5%")

        date_value = date_score(transaction.date, record.date)
        if date_value > 0:
            dimensions["date"] = date_value
            total += date_value * self.date_weight
            weight_sum += self.date_weight

            diff_days = days_between(transaction.date, record.date)
            if diff_days is not None and diff_days <= 7:
                reasons.append(_days_reason(diff_days))

        text_value = text_similarity(transaction.description, record.match_text)
        if text_value > 0:
            dimensions["text"] = text_value
            total += text_value * self.text_weight
            weight_sum += self.text_weight

            if text_value >= 0.5:
                reasons.append("name match")
            elif text_value >= 0.3:
                reasons.append("partial name match")

        final = total / weight_sum if weight_sum > 0 else 0.0
        # Guard against float drift pushing the average past the bounds
        final = min(1.0, max(0.0, final))

        return ScoreBreakdown(score=final, reasons=reasons, dimensions=dimensions)


class AdditivePointStrategy(ScoringStrategy):
    """
    Additive 0-100 point score.

    Up to 50 points for amount, 25 for date, 15 for name similarity and
    10 for a shared group (package) identifier.
    """

    max_score = 100.0

    EXACT_AMOUNT_TOLERANCE = Decimal("0.01")

    # (max relative difference, points, reason)
    AMOUNT_POINTS: tuple[tuple[Decimal, int, str], ...] = (
        (Decimal("0.01"), 45, "amount ~99%"),
        (Decimal("0.05"), 30, "amount ~95%"),
    )
    EXACT_AMOUNT_POINTS = 50

    # (max days apart, points, reason)
    DATE_POINTS: tuple[tuple[int, int, str], ...] = (
        (3, 25, "date ±3 days"),
        (7, 20, "date ±7 days"),
        (30, 10, "date ±30 days"),
    )

    # (similarity strictly above, points, reason)
    TEXT_POINTS: tuple[tuple[float, int, str], ...] = (
        (0.7, 15, "name match"),
        (0.4, 10, "partial name match"),
    )

    GROUP_POINTS = 10

    def score(
        self, transaction: BankTransaction, record: MatchableRecord
    ) -> Optional[ScoreBreakdown]:
        """Sum the points earned on each dimension."""
        reasons: list[str] = []
        dimensions: dict[str, float] = {}

        amount_points = self._amount_points(transaction, record, reasons)
        if amount_points:
            dimensions["amount"] = amount_points

        diff_days = days_between(transaction.date, record.date)
        if diff_days is not None:
            for max_days, points, reason in self.DATE_POINTS:
                if diff_days <= max_days:
                    dimensions["date"] = points
                    reasons.append(reason)
                    break

        name = record.vendor_or_client or record.description
        if transaction.description and name:
            similarity = text_similarity(transaction.description, name)
            for threshold, points, reason in self.TEXT_POINTS:
                if similarity > threshold:
                    dimensions["text"] = points
                    reasons.append(reason)
                    break

        if (
            transaction.group_id
            and record.group_id
            and transaction.group_id == record.group_id
        ):
            dimensions["group"] = self.GROUP_POINTS
            reasons.append("same group")

        return ScoreBreakdown(
            score=float(sum(dimensions.values())),
            reasons=reasons,
            dimensions=dimensions,
        )

    def _amount_points(
        self,
        transaction: BankTransaction,
        record: MatchableRecord,
        reasons: list[str],
    ) -> int:
        txn_amount = to_decimal(transaction.amount)
        record_amount = to_decimal(record.amount)
        if not txn_amount or not record_amount:
            return 0

        txn_abs = abs(txn_amount)
        record_abs = abs(record_amount)
        amount_diff = abs(txn_abs - record_abs)

        if amount_diff < self.EXACT_AMOUNT_TOLERANCE:
            reasons.append("exact amount")
            return self.EXACT_AMOUNT_POINTS

        percent_diff = amount_diff / max(txn_abs, record_abs)
        for max_diff, points, reason in self.AMOUNT_POINTS:
            if percent_diff <= max_diff:
                reasons.append(reason)
                return points
        return 0
