"""Public entry point of the search core.

``SearchService`` binds the strategy engines to a caller-owned
``SearchEngineState`` and accepts raw note records (``Note`` objects or
mappings). It is what the UI layer and the HTTP host call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from notesearch.models import (
    AnalyticsSummary,
    Note,
    SearchCluster,
    SearchOptions,
    SearchResult,
    coerce_notes,
)
from notesearch.search.clustering import ClusteringStrategy, GreedyClustering, apply_clustering
from notesearch.search.distance import EditDistanceStrategy
from notesearch.search.engine import (
    CombinedSearchEngine,
    ExactSearchEngine,
    FuzzySearchEngine,
    NLPSearchEngine,
    SemanticSearchEngine,
    normalize_query,
    unique_by_id,
)
from notesearch.search.ranking import attach_signals
from notesearch.search.suggestions import get_search_suggestions
from notesearch.search.tokenizer import tokenize
from notesearch.services.search_metrics import SearchMetrics
from notesearch.state import SearchEngineState

logger = logging.getLogger(__name__)

NoteInput = Iterable[Note | Mapping[str, Any]] | None


class SearchService:
    """Multi-strategy note search bound to one engine state.

    Args:
        state: Access counters and clock; a fresh state if omitted.
        edit_distance: Edit-distance strategy for the fuzzy matcher.
        clustering: Clustering strategy; greedy with the per-call threshold if omitted.
    """

    def __init__(
        self,
        state: SearchEngineState | None = None,
        edit_distance: EditDistanceStrategy | None = None,
        clustering: ClusteringStrategy | None = None,
    ) -> None:
        self.state = state or SearchEngineState()
        self._exact = ExactSearchEngine()
        self._fuzzy = FuzzySearchEngine(edit_distance)
        self._semantic = SemanticSearchEngine()
        self._nlp = NLPSearchEngine()
        self._clustering = clustering
        self._combined = CombinedSearchEngine(
            exact=self._exact,
            fuzzy=self._fuzzy,
            semantic=self._semantic,
            nlp=self._nlp,
            clustering=clustering,
        )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def combined_search(
        self,
        query: str | None,
        notes: NoteInput,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Run all enabled strategies and return the merged, ranked list."""
        return self._combined.search(
            query,
            coerce_notes(notes),
            options,
            access_counts=self.state.snapshot(),
            now=self.state.now(),
        )

    def exact_search(
        self,
        query: str | None,
        notes: NoteInput,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        options = options or SearchOptions()
        results = self._exact.search(
            query,
            self._corpus(notes),
            include_title=options.include_title,
            include_content=options.include_content,
            include_tags=options.include_tags,
            context_window=options.context_window,
        )
        return self._with_signals(results, query, options)

    def fuzzy_search(
        self,
        query: str | None,
        notes: NoteInput,
        threshold: float | None = None,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        options = options or SearchOptions()
        if threshold is None:
            threshold = options.fuzzy_threshold
        results = self._fuzzy.search(query, self._corpus(notes), threshold, options.context_window)
        return self._with_signals(results, query, options)

    def semantic_search(
        self,
        query: str | None,
        notes: NoteInput,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        options = options or SearchOptions()
        results = self._semantic.search(
            query,
            self._corpus(notes),
            cosine_weight=options.semantic_cosine_weight,
            context_weight=options.semantic_context_weight,
            min_score=options.semantic_min_score,
            context_window=options.context_window,
        )
        return self._with_signals(results, query, options)

    def nlp_search(
        self,
        query: str | None,
        notes: NoteInput,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Heuristic NLP strategy; see ``NLPSearchEngine`` for its limits."""
        options = options or SearchOptions()
        results = self._nlp.search(
            query,
            self._corpus(notes),
            min_score=options.nlp_min_score,
            context_window=options.context_window,
        )
        return self._with_signals(results, query, options)

    @staticmethod
    def _corpus(notes: NoteInput) -> list[Note]:
        return unique_by_id(coerce_notes(notes))

    def _with_signals(
        self,
        results: Sequence[SearchResult],
        query: str | None,
        options: SearchOptions,
    ) -> list[SearchResult]:
        if not results:
            return []
        return attach_signals(
            results,
            tokenize(normalize_query(query)),
            self.state.snapshot(),
            self.state.now(),
            options,
        )

    # ------------------------------------------------------------------
    # Popularity
    # ------------------------------------------------------------------

    def track_note_access(self, note_id: str) -> int:
        """Record that a note was opened; returns the new access count."""
        count = self.state.track_access(note_id)
        logger.debug("Note %s accessed (count=%d)", note_id, count)
        return count

    # ------------------------------------------------------------------
    # Clustering
    # ------------------------------------------------------------------

    def _clustering_strategy(self, options: SearchOptions | None) -> ClusteringStrategy:
        if self._clustering is not None:
            return self._clustering
        options = options or SearchOptions()
        return GreedyClustering(options.cluster_similarity_threshold)

    def apply_clustering(
        self,
        results: list[SearchResult],
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Assign ``cluster_id`` to results; fewer than three are returned unchanged."""
        return apply_clustering(results, self._clustering_strategy(options))

    def get_search_clusters(
        self,
        results: Sequence[SearchResult],
        options: SearchOptions | None = None,
    ) -> list[SearchCluster]:
        return self._clustering_strategy(options).build_clusters(results)

    # ------------------------------------------------------------------
    # Read-only paths
    # ------------------------------------------------------------------

    def get_search_suggestions(self, query: str | None, notes: NoteInput) -> list[str]:
        return get_search_suggestions(normalize_query(query), notes)

    def get_search_analytics(
        self,
        queries: Iterable[str] | None,
        notes: NoteInput,
        options: SearchOptions | None = None,
    ) -> AnalyticsSummary:
        """Summarise a query history; each query is re-run through ``combined_search``."""
        history = [q for q in (queries or []) if isinstance(q, str)]
        corpus = coerce_notes(notes)
        metrics = SearchMetrics(lambda query, corpus_: self.combined_search(query, corpus_, options))
        return metrics.get_search_analytics(history, corpus)
