"""Tests for text normalization and word-overlap similarity."""

import pytest

from agency_recon.matching.text import jaccard_similarity, normalize_text, tokenize


class TestNormalizeText:
    def test_strips_greek_accents(self):
        assert normalize_text("Ταξίδια ΑΕ!") == "ταξιδια αε"

    def test_strips_latin_accents_and_punctuation(self):
        assert normalize_text("  Café-Bar 24 ") == "cafebar 24"

    def test_none_and_empty(self):
        assert normalize_text(None) == ""
        assert normalize_text("") == ""

    def test_keeps_final_sigma(self):
        assert normalize_text("ΟΔΟΣ") == "οδος"

    def test_drops_other_scripts(self):
        assert normalize_text("Привет 42") == "42"


class TestTokenize:
    def test_drops_short_words(self):
        assert tokenize("ΔΕΗ ΑΕ") == {"δεη"}

    def test_deduplicates(self):
        assert tokenize("hotel HOTEL Hôtel") == {"hotel"}


class TestJaccardSimilarity:
    def test_identical_ignoring_short_words(self):
        assert jaccard_similarity("AEGEAN AIRLINES", "Aegean Airlines SA") == 1.0

    def test_partial_overlap(self):
        assert jaccard_similarity("hotel athens booking", "hotel booking") == pytest.approx(
            2 / 3
        )

    def test_no_overlap(self):
        assert jaccard_similarity("olympic air", "hotel booking") == 0.0

    def test_empty_side_is_zero(self):
        assert jaccard_similarity("", "hotel") == 0.0
        assert jaccard_similarity("hotel", None) == 0.0

    def test_only_short_words_is_zero(self):
        assert jaccard_similarity("ab cd", "ab cd") == 0.0
