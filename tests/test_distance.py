"""Tests for edit-distance strategies."""

from __future__ import annotations

import pytest

from notesearch.models import Note
from notesearch.search.distance import EditDistanceStrategy, LevenshteinDistance
from notesearch.search.engine import FuzzySearchEngine


class _AlwaysEqual(EditDistanceStrategy):
    """Treats every pair of tokens as identical."""

    def distance(self, a: str, b: str) -> int:
        return 0


class TestLevenshteinDistance:
    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            ("kitten", "sitting", 3),
            ("", "abc", 3),
            ("abc", "", 3),
            ("abc", "abc", 0),
            ("flaw", "lawn", 2),
        ],
    )
    def test_distance(self, a: str, b: str, expected: int):
        assert LevenshteinDistance().distance(a, b) == expected

    def test_similarity_single_typo(self):
        assert LevenshteinDistance().similarity("javascrpt", "javascript") == pytest.approx(0.9)

    def test_similarity_of_empty_strings(self):
        assert LevenshteinDistance().similarity("", "") == 0.0

    def test_tokens_truncated_to_cap(self):
        lev = LevenshteinDistance(max_token_length=5)
        assert lev.distance("a" * 1000, "a" * 999 + "b") == 0
        assert lev.similarity("a" * 1000, "a" * 999 + "b") == 1.0


class TestBestMatchScore:
    def test_averages_best_similarity_per_query_token(self):
        lev = LevenshteinDistance()
        score = lev.best_match_score(["python", "zzzzzz"], ["python", "guide"])
        assert score == pytest.approx(0.5)

    def test_empty_sides(self):
        lev = LevenshteinDistance()
        assert lev.best_match_score([], ["abc"]) == 0.0
        assert lev.best_match_score(["abc"], []) == 0.0


def test_fuzzy_engine_accepts_custom_strategy():
    note = Note(id="1", title="foo bar", body="baz qux")

    results = FuzzySearchEngine(_AlwaysEqual()).search("xyz", [note])

    # title 0.4 + body 0.4, no tags
    assert len(results) == 1
    assert results[0].score == pytest.approx(0.8)
