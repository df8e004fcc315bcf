"""Data models for reconciliation."""

from .records import (
    RecordKind,
    ConfidenceLevel,
    MatchStatus,
    ReconciliationStatus,
    BankTransaction,
    MatchableRecord,
    MatchSuggestion,
    SuggestionStats,
    Match,
    MatchDecision,
    ReconcileResult,
)

__all__ = [
    "RecordKind",
    "ConfidenceLevel",
    "MatchStatus",
    "ReconciliationStatus",
    "BankTransaction",
    "MatchableRecord",
    "MatchSuggestion",
    "SuggestionStats",
    "Match",
    "MatchDecision",
    "ReconcileResult",
]
