"""Relevance, freshness and popularity signals, the final ranking formula, and boosts.

Ranking score::

    ranking = w_score * merged + w_rel * relevance + w_fresh * freshness + w_pop * popularity

Boosts then multiply the ranking score::

    recency    = 1 + recency_boost * max(0, 1 - age / recency_window)
    popularity = 1 + min(popularity_boost_cap, popularity_boost_per_access * access_count)

All weights come from ``SearchOptions``; defaults are 0.5 / 0.3 / 0.1 / 0.1,
0.2 over 30 days, and 0.01 per access capped at 0.3.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime

from notesearch.models import Note, SearchOptions, SearchResult
from notesearch.search.tokenizer import tokenize

_SECONDS_PER_DAY = 24 * 60 * 60


def age_in_days(note: Note, now: datetime) -> float | None:
    """Days since the note was last modified, never negative; None if undated."""
    modified = note.last_modified
    if modified is None:
        return None
    return max(0.0, (now - modified).total_seconds() / _SECONDS_PER_DAY)


def relevance_score(note: Note, query_tokens: Sequence[str]) -> float:
    """Fraction of query tokens that occur among the note's title/body tokens."""
    if not query_tokens:
        return 0.0
    note_tokens = set(tokenize(note.text))
    matches = sum(1 for token in query_tokens if token in note_tokens)
    return matches / len(query_tokens)


def freshness_score(note: Note, now: datetime, decay_days: float = 365.0) -> float:
    """Linear decay from 1.0 (modified now) to 0.0 (``decay_days`` old or undated)."""
    age = age_in_days(note, now)
    if age is None:
        return 0.0
    return max(0.0, 1.0 - age / decay_days)


def popularity_score(access_count: int, saturation: int = 100) -> float:
    """Access count normalised to [0, 1], saturating at ``saturation`` accesses."""
    return min(1.0, access_count / saturation)


def recency_multiplier(note: Note, now: datetime, options: SearchOptions) -> float:
    age = age_in_days(note, now)
    if age is None:
        return 1.0
    return 1.0 + options.recency_boost * max(0.0, 1.0 - age / options.recency_window_days)


def popularity_multiplier(access_count: int, options: SearchOptions) -> float:
    return 1.0 + min(options.popularity_boost_cap, access_count * options.popularity_boost_per_access)


def attach_signals(
    results: Sequence[SearchResult],
    query_tokens: Sequence[str],
    access_counts: Mapping[str, int],
    now: datetime,
    options: SearchOptions | None = None,
) -> list[SearchResult]:
    """Return copies of *results* carrying relevance, freshness and popularity.

    Scores are left untouched.
    """
    options = options or SearchOptions()
    return [
        result.model_copy(
            update={
                "relevance_score": relevance_score(result.note, query_tokens),
                "freshness_score": freshness_score(result.note, now, options.freshness_decay_days),
                "popularity_score": popularity_score(
                    access_counts.get(result.note.id, 0), options.popularity_saturation
                ),
            }
        )
        for result in results
    ]


def rank_results(
    results: Sequence[SearchResult],
    query_tokens: Sequence[str],
    options: SearchOptions,
    access_counts: Mapping[str, int],
    now: datetime,
) -> list[SearchResult]:
    """Apply the ranking formula and enabled boosts to merged results.

    The input ``score`` is the merged (weighted-sum) score. The returned
    list is in input order; sorting is the caller's job.
    """
    ranked: list[SearchResult] = []
    for result in attach_signals(results, query_tokens, access_counts, now, options):
        access_count = access_counts.get(result.note.id, 0)
        ranking = (
            options.ranking_score_weight * result.score
            + options.ranking_relevance_weight * (result.relevance_score or 0.0)
            + options.ranking_freshness_weight * (result.freshness_score or 0.0)
            + options.ranking_popularity_weight * (result.popularity_score or 0.0)
        )
        score = ranking
        if options.boost_recent:
            score *= recency_multiplier(result.note, now, options)
        if options.boost_popular:
            score *= popularity_multiplier(access_count, options)

        explanation = result.match_explanation
        if explanation is not None:
            explanation = explanation.model_copy(update={"ranking_score": ranking})
        ranked.append(result.model_copy(update={"score": score, "match_explanation": explanation}))
    return ranked


def sort_results(results: Sequence[SearchResult]) -> list[SearchResult]:
    """Sort by score descending; equal scores keep their input order."""
    return sorted(results, key=lambda r: r.score, reverse=True)
