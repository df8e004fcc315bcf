"""Tests for confidence classification."""

import pytest

from agency_recon.matching.confidence import (
    classify_confidence,
    classify_points,
    get_confidence_style,
)
from agency_recon.models.records import ConfidenceLevel


class TestClassifyConfidence:
    @pytest.mark.parametrize(
        "confidence, expected",
        [
            (1.0, ConfidenceLevel.HIGH),
            (0.9, ConfidenceLevel.HIGH),
            (0.8999, ConfidenceLevel.MEDIUM),
            (0.7, ConfidenceLevel.MEDIUM),
            (0.69, ConfidenceLevel.LOW),
            (0.0, ConfidenceLevel.LOW),
        ],
    )
    def test_default_thresholds(self, confidence, expected):
        assert classify_confidence(confidence) == expected

    def test_custom_thresholds(self):
        assert classify_confidence(0.8, high_threshold=0.8) == ConfidenceLevel.HIGH
        assert classify_confidence(0.6, medium_threshold=0.6) == ConfidenceLevel.MEDIUM

    def test_points_scale(self):
        assert classify_points(90) == ConfidenceLevel.HIGH
        assert classify_points(75) == ConfidenceLevel.MEDIUM
        assert classify_points(60) == ConfidenceLevel.LOW


class TestConfidenceStyle:
    def test_each_level_has_distinct_style(self):
        styles = [get_confidence_style(level) for level in ConfidenceLevel]

        assert [s.level for s in styles] == list(ConfidenceLevel)
        assert len({s.fill_color for s in styles}) == 3
        assert get_confidence_style(ConfidenceLevel.HIGH).color == "green"
        assert get_confidence_style(ConfidenceLevel.LOW).label == "Low"
