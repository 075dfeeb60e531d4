"""Sparse term-frequency vectors and cosine similarity.

Vectors are plain ``dict[str, float]`` keyed by token. Similarity is
computed with numpy over the union of both vectors' terms.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import numpy as np

from notesearch.config import get_settings
from notesearch.models import Note
from notesearch.search.tokenizer import tokenize

TermVector = dict[str, float]


def term_vector(tokens: Sequence[str], max_terms: int | None = None) -> TermVector:
    """Count token occurrences.

    Only the ``max_terms`` most frequent terms are kept (ties keep the
    earliest occurrence), which bounds the cost of comparing huge notes.
    """
    if max_terms is None:
        max_terms = get_settings().MAX_VECTOR_TERMS
    counts = Counter(tokens)
    if len(counts) > max_terms:
        return {term: float(count) for term, count in counts.most_common(max_terms)}
    return {term: float(count) for term, count in counts.items()}


def note_vector(note: Note, max_terms: int | None = None) -> TermVector:
    """Vector over a note's title, body and tags."""
    return term_vector(tokenize(note.full_text), max_terms)


def _aligned(vectors: Sequence[TermVector]) -> tuple[list[str], np.ndarray]:
    vocabulary = list(dict.fromkeys(term for vector in vectors for term in vector))
    matrix = np.array(
        [[vector.get(term, 0.0) for term in vocabulary] for vector in vectors],
        dtype=np.float64,
    )
    return vocabulary, matrix


def cosine_similarity(a: TermVector, b: TermVector) -> float:
    """Cosine of the angle between two sparse vectors; 0.0 if either is empty."""
    if not a or not b:
        return 0.0
    _, matrix = _aligned([a, b])
    norm = float(np.linalg.norm(matrix[0]) * np.linalg.norm(matrix[1]))
    if norm == 0.0:
        return 0.0
    return float(np.dot(matrix[0], matrix[1]) / norm)


def compute_centroid(vectors: Sequence[TermVector]) -> TermVector:
    """Element-wise mean of *vectors* over their combined vocabulary."""
    if not vectors:
        return {}
    vocabulary, matrix = _aligned(vectors)
    if not vocabulary:
        return {}
    mean = np.mean(matrix, axis=0)
    return {term: float(value) for term, value in zip(vocabulary, mean)}
