"""Tests for term vectors, cosine similarity and centroids."""

from __future__ import annotations

import math

import pytest

from notesearch.models import Note
from notesearch.search.vectors import compute_centroid, cosine_similarity, note_vector, term_vector


def test_term_vector_counts():
    assert term_vector(["a", "b", "a"]) == {"a": 2.0, "b": 1.0}


def test_term_vector_keeps_most_frequent_terms():
    assert term_vector(["x", "y", "y", "z", "z", "z"], max_terms=2) == {"z": 3.0, "y": 2.0}


def test_note_vector_includes_tags():
    note = Note(id="1", title="Python", body="", tags=["guide"])
    assert note_vector(note) == {"python": 1.0, "guide": 1.0}


class TestCosineSimilarity:
    def test_identical(self):
        v = {"python": 2.0, "guide": 1.0}
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_disjoint(self):
        assert cosine_similarity({"a": 1.0}, {"b": 1.0}) == 0.0

    def test_empty(self):
        assert cosine_similarity({}, {"a": 1.0}) == 0.0
        assert cosine_similarity({"a": 1.0}, {}) == 0.0

    def test_partial_overlap(self):
        assert cosine_similarity({"a": 1.0, "b": 1.0}, {"a": 1.0}) == pytest.approx(1 / math.sqrt(2))


class TestComputeCentroid:
    def test_mean_over_union(self):
        assert compute_centroid([{"a": 2.0}, {"b": 2.0}]) == {"a": 1.0, "b": 1.0}

    def test_single_vector(self):
        assert compute_centroid([{"a": 3.0}]) == {"a": 3.0}

    def test_empty(self):
        assert compute_centroid([]) == {}
