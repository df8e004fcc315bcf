"""
Interactive suggestion ranking.

For a single bank transaction, score every candidate record, keep the
plausible ones and return the best few with the reasons behind each
score. Ranking is pure: the same inputs always give the same ordered
output.
"""

from collections.abc import Iterable, Sequence
from typing import Optional
import logging

from ..config import SuggestionSettings
from ..models.records import (
    BankTransaction,
    ConfidenceLevel,
    MatchableRecord,
    MatchSuggestion,
    SuggestionStats,
)
from .confidence import HIGH_THRESHOLD, MEDIUM_THRESHOLD, classify_confidence
from .strategies import NormalizedWeightedStrategy, ScoringStrategy

logger = logging.getLogger(__name__)

DEFAULT_MAX_SUGGESTIONS = 5
DEFAULT_MIN_CONFIDENCE = 0.5


def rank(
    transaction: BankTransaction,
    records: Iterable[MatchableRecord],
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    strategy: Optional[ScoringStrategy] = None,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    high_threshold: float = HIGH_THRESHOLD,
    medium_threshold: float = MEDIUM_THRESHOLD,
) -> list[MatchSuggestion]:
    """
    Rank candidate records for one transaction.

    Args:
        transaction: Bank transaction to explain
        records: Candidate records
        max_suggestions: Maximum number of suggestions returned
        strategy: Scoring strategy on a 0-1 scale (normalized weighted by default)
        min_confidence: Suggestions scoring below this are dropped
        high_threshold: Lower bound of the high confidence level
        medium_threshold: Lower bound of the medium confidence level

    Returns:
        Suggestions sorted by confidence, best first
    """
    if max_suggestions <= 0:
        return []

    strategy = strategy or NormalizedWeightedStrategy()
    suggestions: list[MatchSuggestion] = []

    for record in records:
        breakdown = strategy.score(transaction, record)
        if breakdown is None:
            continue

        confidence = breakdown.score / strategy.max_score
        if confidence < min_confidence:
            continue

        suggestions.append(
            MatchSuggestion(
                record_id=record.id,
                record_kind=record.kind,
                confidence=confidence,
                confidence_level=classify_confidence(
                    confidence, high_threshold, medium_threshold
                ),
                reasons=list(breakdown.reasons),
                record=record,
            )
        )

    # sorted() is stable, so equal scores keep input order
    suggestions = sorted(suggestions, key=lambda s: s.confidence, reverse=True)
    return suggestions[:max_suggestions]


class SuggestionRanker:
    """
    Configured ranker used by the review screens.

    Wraps rank() with weights and thresholds from configuration and adds
    the per-batch helpers the review views need.
    """

    def __init__(
        self,
        settings: Optional[SuggestionSettings] = None,
        strategy: Optional[ScoringStrategy] = None,
    ):
        """
        Initialize the ranker.

        Args:
            settings: Suggestion settings (defaults if omitted)
            strategy: Scoring strategy override
        """
        self.settings = settings or SuggestionSettings()
        self.strategy = strategy or NormalizedWeightedStrategy(
            amount_weight=self.settings.amount_weight,
            date_weight=self.settings.date_weight,
            text_weight=self.settings.text_weight,
        )

    def rank(
        self,
        transaction: BankTransaction,
        records: Iterable[MatchableRecord],
        max_suggestions: Optional[int] = None,
    ) -> list[MatchSuggestion]:
        return rank(
            transaction,
            records,
            max_suggestions=(
                self.settings.max_suggestions
                if max_suggestions is None
                else max_suggestions
            ),
            strategy=self.strategy,
            min_confidence=self.settings.min_confidence,
            high_threshold=self.settings.high_threshold,
            medium_threshold=self.settings.medium_threshold,
        )

    def suggest_all(
        self,
        transactions: Iterable[BankTransaction],
        records: Sequence[MatchableRecord],
        matched_ids: Iterable[str] = (),
    ) -> dict[str, list[MatchSuggestion]]:
        """
        Rank records for every transaction not already matched.

        Args:
            transactions: Bank transactions
            records: Candidate records
            matched_ids: Ids of transactions that already have a match

        Returns:
            Mapping of transaction id to its suggestions, in input order
        """
        skip = set(matched_ids)
        results: dict[str, list[MatchSuggestion]] = {}

        for txn in transactions:
            if txn.id in skip:
                continue
            results[txn.id] = self.rank(txn, records)

        logger.debug(
            f"Ranked {len(records)} records for {len(results)} transactions"
        )
        return results

    def best_suggestion(
        self,
        transaction: BankTransaction,
        records: Iterable[MatchableRecord],
    ) -> Optional[MatchSuggestion]:
        suggestions = self.rank(transaction, records, max_suggestions=1)
        return suggestions[0] if suggestions else None

    @staticmethod
    def stats(
        suggestions_by_txn: dict[str, list[MatchSuggestion]],
    ) -> SuggestionStats:
        """Count transactions by the level of their best suggestion."""
        stats = SuggestionStats()
        for suggestions in suggestions_by_txn.values():
            if not suggestions:
                continue
            stats.total += 1
            level = suggestions[0].confidence_level
            if level == ConfidenceLevel.HIGH:
                stats.high += 1
            elif level == ConfidenceLevel.MEDIUM:
                stats.medium += 1
            else:
                stats.low += 1
        return stats


def _record_key(record: MatchableRecord) -> tuple:
    return (
        record.id,
        record.kind,
        record.amount,
        record.date,
        record.vendor_or_client,
        record.description,
    )


class SuggestionCache:
    """
    Memoized ranking for views that re-render often.

    Entries are keyed by the transaction's and records' scoring fields, so
    a changed transaction or candidate pool simply misses and is ranked
    again. Nothing else is shared between calls.
    """

    def __init__(self, ranker: Optional[SuggestionRanker] = None, max_entries: int = 1024):
        self.ranker = ranker or SuggestionRanker()
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self._entries: dict[tuple, list[MatchSuggestion]] = {}

    def get(
        self,
        transaction: BankTransaction,
        records: Sequence[MatchableRecord],
    ) -> list[MatchSuggestion]:
        key = (
            transaction.id,
            transaction.amount,
            transaction.date,
            transaction.description,
            tuple(_record_key(r) for r in records),
        )

        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            return list(cached)

        self.misses += 1
        suggestions = self.ranker.rank(transaction, records)

        if len(self._entries) >= self.max_entries:
            # Drop the oldest entry; dicts keep insertion order
            self._entries.pop(next(iter(self._entries)))
        self._entries[key] = suggestions
        return list(suggestions)

    def invalidate(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
