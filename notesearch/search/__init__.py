"""Search engine package: four strategies, merger, clustering and suggestions."""

from notesearch.search.clustering import ClusteringStrategy, GreedyClustering, apply_clustering
from notesearch.search.distance import EditDistanceStrategy, LevenshteinDistance
from notesearch.search.engine import (
    CombinedSearchEngine,
    ExactSearchEngine,
    FuzzySearchEngine,
    NLPSearchEngine,
    SemanticSearchEngine,
    exact_search,
    fuzzy_search,
    nlp_search,
    semantic_search,
)
from notesearch.search.snippets import highlight_search_terms
from notesearch.search.suggestions import get_search_suggestions
from notesearch.search.tokenizer import tokenize

__all__ = [
    "ClusteringStrategy",
    "CombinedSearchEngine",
    "EditDistanceStrategy",
    "ExactSearchEngine",
    "FuzzySearchEngine",
    "GreedyClustering",
    "LevenshteinDistance",
    "NLPSearchEngine",
    "SemanticSearchEngine",
    "apply_clustering",
    "exact_search",
    "fuzzy_search",
    "get_search_suggestions",
    "highlight_search_terms",
    "nlp_search",
    "semantic_search",
    "tokenize",
]
