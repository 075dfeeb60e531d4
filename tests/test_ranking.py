"""Tests for relevance, freshness and popularity signals and boosts."""

from __future__ import annotations

import pytest

from notesearch.constants import MatchType
from notesearch.models import MatchExplanation, SearchOptions, SearchResult
from notesearch.search.ranking import (
    freshness_score,
    popularity_multiplier,
    popularity_score,
    rank_results,
    recency_multiplier,
    relevance_score,
    sort_results,
)
from tests.conftest import FIXED_NOW, make_note


class TestSignals:
    def test_relevance_is_fraction_of_query_tokens(self):
        note = make_note("1", "Python guide")
        assert relevance_score(note, ["python", "java"]) == pytest.approx(0.5)
        assert relevance_score(note, []) == 0.0

    def test_freshness_decays_linearly(self):
        assert freshness_score(make_note("1", age_days=0), FIXED_NOW) == 1.0
        assert freshness_score(make_note("1", age_days=73), FIXED_NOW) == pytest.approx(0.8)
        assert freshness_score(make_note("1", age_days=500), FIXED_NOW) == 0.0

    def test_future_dated_note_is_fresh(self):
        assert freshness_score(make_note("1", age_days=-5), FIXED_NOW) == 1.0

    def test_undated_note(self):
        note = make_note("1", age_days=None)
        assert freshness_score(note, FIXED_NOW) == 0.0
        assert recency_multiplier(note, FIXED_NOW, SearchOptions()) == 1.0

    def test_freshness_falls_back_to_created_at(self):
        note = make_note("1", age_days=None).model_copy(update={"created_at": FIXED_NOW})
        assert freshness_score(note, FIXED_NOW) == 1.0

    def test_popularity_saturates(self):
        assert popularity_score(50) == pytest.approx(0.5)
        assert popularity_score(1000) == 1.0

    def test_recency_multiplier(self):
        options = SearchOptions()
        assert recency_multiplier(make_note("1", age_days=0), FIXED_NOW, options) == pytest.approx(1.2)
        assert recency_multiplier(make_note("1", age_days=15), FIXED_NOW, options) == pytest.approx(1.1)
        assert recency_multiplier(make_note("1", age_days=45), FIXED_NOW, options) == 1.0

    def test_popularity_multiplier_is_capped(self):
        options = SearchOptions()
        assert popularity_multiplier(10, options) == pytest.approx(1.1)
        assert popularity_multiplier(500, options) == pytest.approx(1.3)


class TestRankResults:
    def test_formula_and_boosts(self):
        result = SearchResult(
            note=make_note("1", "python guide", age_days=73),
            score=1.0,
            match_type=MatchType.EXACT,
            match_explanation=MatchExplanation(contributions=[], merged_score=1.0),
        )

        [ranked] = rank_results([result], ["python", "java"], SearchOptions(), {"1": 20}, FIXED_NOW)

        # 0.5 * 1.0 + 0.3 * 0.5 + 0.1 * 0.8 + 0.1 * 0.2 = 0.75; popularity boost 1.2
        assert ranked.match_explanation.ranking_score == pytest.approx(0.75)
        assert ranked.score == pytest.approx(0.9)
        assert ranked.relevance_score == pytest.approx(0.5)
        assert ranked.freshness_score == pytest.approx(0.8)
        assert ranked.popularity_score == pytest.approx(0.2)
        assert result.score == 1.0

    def test_custom_weights(self):
        result = SearchResult(note=make_note("1", "python"), score=2.0, match_type=MatchType.FUZZY)
        options = SearchOptions(
            ranking_score_weight=1.0,
            ranking_relevance_weight=0.0,
            ranking_freshness_weight=0.0,
            ranking_popularity_weight=0.0,
            boost_recent=False,
            boost_popular=False,
        )

        [ranked] = rank_results([result], ["python"], options, {}, FIXED_NOW)

        assert ranked.score == pytest.approx(2.0)


def test_sort_results_is_stable():
    results = [
        SearchResult(note=make_note(str(i)), score=score, match_type=MatchType.EXACT)
        for i, score in enumerate([0.5, 0.9, 0.5, 0.1])
    ]

    assert [r.note.id for r in sort_results(results)] == ["1", "0", "2", "3"]
