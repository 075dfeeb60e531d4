"""Search analytics over a caller-supplied query history.

The history is read-only input; nothing here is persisted and access
counters are never touched.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Callable, Sequence

from notesearch.models import AnalyticsSummary, Note, SearchResult, SearchTrends
from notesearch.search.tokenizer import tokenize

logger = logging.getLogger(__name__)

SearchFn = Callable[[str, Sequence[Note]], list[SearchResult]]


def calculate_query_complexity(query: str) -> float:
    """``0.4 * unique tokens + 0.3 * mean token length + 0.3 * token count``; 0.0 without tokens."""
    tokens = tokenize(query)
    if not tokens:
        return 0.0
    avg_word_length = sum(len(token) for token in tokens) / len(tokens)
    return len(set(tokens)) * 0.4 + avg_word_length * 0.3 + len(tokens) * 0.3


class SearchMetrics:
    """Compute analytics by replaying each query through a search function.

    Args:
        search: Callable running a combined search for ``(query, notes)``.
    """

    def __init__(self, search: SearchFn) -> None:
        self._search = search

    def get_search_analytics(self, queries: Sequence[str], notes: Sequence[Note]) -> AnalyticsSummary:
        """Aggregate statistics over *queries* against *notes*.

        Effectiveness is the fraction of queries that return at least one
        result when re-run now.
        """
        total = len(queries)
        if total == 0:
            return AnalyticsSummary()

        word_counts: Counter[str] = Counter()
        popular: Counter[str] = Counter()
        complexity: list[float] = []
        zero_result: list[str] = []
        effective = 0
        total_results = 0
        total_duration = 0.0

        for query in queries:
            popular[query] += 1
            word_counts.update(tokenize(query))
            complexity.append(calculate_query_complexity(query))

            started = time.perf_counter()
            results = self._search(query, notes)
            total_duration += time.perf_counter() - started

            total_results += len(results)
            if results:
                effective += 1
            elif query not in zero_result:
                zero_result.append(query)

        summary = AnalyticsSummary(
            total_queries=total,
            average_query_length=sum(len(q) for q in queries) / total,
            most_common_words=dict(word_counts.most_common()),
            popular_searches=dict(popular.most_common()),
            search_effectiveness=effective / total,
            search_trends=SearchTrends(query_complexity=complexity),
            average_results_per_query=total_results / total,
            zero_result_queries=zero_result,
            average_search_time_ms=round(total_duration / total * 1000, 3),
        )
        logger.info(
            "Search analytics: queries=%d effectiveness=%.2f zero_result=%d",
            total,
            summary.search_effectiveness,
            len(zero_result),
        )
        return summary
