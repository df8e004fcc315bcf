"""Scoring, ranking and batch matching."""

from .engine import ReconciliationEngine
from .ranker import SuggestionRanker, SuggestionCache, rank
from .strategies import (
    ScoringStrategy,
    ScoreBreakdown,
    NormalizedWeightedStrategy,
    AdditivePointStrategy,
)
from .confidence import (
    ConfidenceStyle,
    classify_confidence,
    classify_points,
    get_confidence_style,
)
from .scorers import amount_score, date_score, text_similarity
from .text import normalize_text, jaccard_similarity

__all__ = [
    "ReconciliationEngine",
    "SuggestionRanker",
    "SuggestionCache",
    "rank",
    "ScoringStrategy",
    "ScoreBreakdown",
    "NormalizedWeightedStrategy",
    "AdditivePointStrategy",
    "ConfidenceStyle",
    "classify_confidence",
    "classify_points",
    "get_confidence_style",
    "amount_score",
    "date_score",
    "text_similarity",
    "normalize_text",
    "jaccard_similarity",
]
