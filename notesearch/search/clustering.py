"""Grouping of ranked results into similarity clusters.

Provides ClusteringStrategy (interface) and GreedyClustering, a single-pass
O(n^2) algorithm: each unassigned result seeds a cluster and absorbs every
later unassigned result whose term-vector cosine similarity to the seed
exceeds the threshold. The outcome depends on input order and is not
globally optimal.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Sequence

from notesearch.constants import CLUSTER_KEYWORD_COUNT
from notesearch.models import Note, SearchCluster, SearchResult
from notesearch.search.tokenizer import tokenize
from notesearch.search.vectors import compute_centroid, cosine_similarity, note_vector

logger = logging.getLogger(__name__)

MIN_RESULTS_FOR_CLUSTERING = 3


class ClusteringStrategy(ABC):
    """Abstract base class for result clustering."""

    @abstractmethod
    def build_clusters(self, results: Sequence[SearchResult]) -> list[SearchCluster]:
        """Partition *results* into clusters.

        Every result belongs to exactly one returned cluster and every
        cluster has at least one member.
        """
        ...


class GreedyClustering(ClusteringStrategy):
    """Seed-and-absorb clustering over note term vectors.

    Args:
        similarity_threshold: Minimum (exclusive) cosine similarity to the seed.
        max_vector_terms: Dimensionality cap for note vectors.
    """

    def __init__(self, similarity_threshold: float = 0.6, max_vector_terms: int | None = None) -> None:
        self._threshold = similarity_threshold
        self._max_vector_terms = max_vector_terms

    def build_clusters(self, results: Sequence[SearchResult]) -> list[SearchCluster]:
        vectors = [note_vector(result.note, self._max_vector_terms) for result in results]
        processed: set[str] = set()
        clusters: list[SearchCluster] = []

        for i, seed in enumerate(results):
            if seed.note.id in processed:
                continue
            processed.add(seed.note.id)
            members = [seed]
            member_vectors = [vectors[i]]

            for j in range(i + 1, len(results)):
                other = results[j]
                if other.note.id in processed:
                    continue
                if cosine_similarity(vectors[i], vectors[j]) > self._threshold:
                    members.append(other)
                    member_vectors.append(vectors[j])
                    processed.add(other.note.id)

            clusters.append(
                SearchCluster(
                    id=f"cluster-{len(clusters)}",
                    name=seed.note.title,
                    notes=members,
                    centroid=compute_centroid(member_vectors),
                    keywords=extract_keywords(seed.note),
                )
            )

        logger.debug("Greedy clustering: %d results -> %d clusters", len(results), len(clusters))
        return clusters


def extract_keywords(note: Note, limit: int = CLUSTER_KEYWORD_COUNT) -> list[str]:
    """Most frequent title/body tokens; ties keep first occurrence."""
    return [word for word, _ in Counter(tokenize(note.text)).most_common(limit)]


def apply_clustering(
    results: list[SearchResult],
    strategy: ClusteringStrategy | None = None,
) -> list[SearchResult]:
    """Return copies of *results* with ``cluster_id`` assigned.

    Fewer than three results are returned unchanged.
    """
    if len(results) < MIN_RESULTS_FOR_CLUSTERING:
        return results
    strategy = strategy or GreedyClustering()
    clusters = strategy.build_clusters(results)
    assignment = {member.note.id: cluster.id for cluster in clusters for member in cluster.notes}
    return [result.model_copy(update={"cluster_id": assignment.get(result.note.id)}) for result in results]
