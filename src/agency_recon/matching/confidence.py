"""Confidence level classification and its presentation styles."""

from dataclasses import dataclass

from ..models.records import ConfidenceLevel

HIGH_THRESHOLD = 0.9
MEDIUM_THRESHOLD = 0.7


@dataclass(frozen=True)
class ConfidenceStyle:
    """How a confidence level is rendered in the console and in reports."""

    level: ConfidenceLevel
    label: str

    # rich style name
    color: str

    # openpyxl solid fill colour (RGB hex)
    fill_color: str


_STYLES: dict[ConfidenceLevel, ConfidenceStyle] = {
    ConfidenceLevel.HIGH: ConfidenceStyle(
        ConfidenceLevel.HIGH, "High", "green", "C6EFCE"
    ),
    ConfidenceLevel.MEDIUM: ConfidenceStyle(
        ConfidenceLevel.MEDIUM, "Medium", "yellow", "FFEB9C"
    ),
    ConfidenceLevel.LOW: ConfidenceStyle(
        ConfidenceLevel.LOW, "Low", "dark_orange", "FCD5B4"
    ),
}


def classify_confidence(
    confidence: float,
    high_threshold: float = HIGH_THRESHOLD,
    medium_threshold: float = MEDIUM_THRESHOLD,
) -> ConfidenceLevel:
    """Map a 0-1 confidence to high / medium / low."""
    if confidence >= high_threshold:
        return ConfidenceLevel.HIGH
    if confidence >= medium_threshold:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def classify_points(points: float) -> ConfidenceLevel:
    """Classify a score on the batch reconciler's 0-100 point scale."""
    return classify_confidence(points / 100)


def get_confidence_style(level: ConfidenceLevel) -> ConfidenceStyle:
    return _STYLES[level]
