"""Data model shared by the search strategies, the merger, and the HTTP host.

Notes are owned by an external store and are read-only here. Results and
clusters are created fresh for every search call.

Field names are snake_case in Python; JSON payloads may use either the
snake_case names or the camelCase names the UI sends (``maxResults``,
``updatedAt``...).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from notesearch.constants import MatchType

logger = logging.getLogger(__name__)

_CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InvalidNotesError(TypeError):
    """Raised when the caller passes a corpus that is not a collection of notes."""


class Note(BaseModel):
    """A note as supplied by the caller.

    Missing or ``None`` text fields default to empty values so that a
    partially filled record never aborts a search.
    """

    model_config = _CAMEL_CONFIG

    id: str
    title: str = ""
    body: str = Field(default="", validation_alias=AliasChoices("body", "content"))
    tags: list[str] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("title", "body", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [t if isinstance(t, str) else str(t) for t in v if t is not None]

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @property
    def text(self) -> str:
        """Title and body joined, the text most strategies read."""
        return f"{self.title} {self.body}"

    @property
    def full_text(self) -> str:
        """Title, body and tags joined, the text the vector model reads."""
        return f"{self.title} {self.body} {' '.join(self.tags)}"

    @property
    def last_modified(self) -> datetime | None:
        return self.updated_at or self.created_at


class StrategyContribution(BaseModel):
    """A single strategy's contribution to a merged result's score."""

    model_config = _CAMEL_CONFIG

    strategy: MatchType
    raw_score: float
    weight: float
    weighted_score: float  # raw_score * weight


class MatchExplanation(BaseModel):
    """Explains how a merged result obtained its score."""

    model_config = _CAMEL_CONFIG

    contributions: list[StrategyContribution]
    merged_score: float
    ranking_score: float | None = None


class SearchResult(BaseModel):
    """A scored note.

    Attributes:
        note: The matching note.
        score: Relevance score; higher is better, unbounded above.
        highlights: Field excerpts explaining the match, in strategy order.
        context: Bounded-length excerpt around the best match.
        match_type: Strategy that first found the note.
        relevance_score: Fraction of query tokens present in the note.
        freshness_score: Linear decay of the note's age over a year.
        popularity_score: Access count normalised to [0, 1].
        cluster_id: Cluster assigned by the clustering engine, if any.
    """

    model_config = _CAMEL_CONFIG

    note: Note
    score: float
    highlights: list[str] = []
    context: str = ""
    match_type: MatchType
    relevance_score: float | None = None
    freshness_score: float | None = None
    popularity_score: float | None = None
    cluster_id: str | None = None
    match_explanation: MatchExplanation | None = None


class SearchOptions(BaseModel):
    """Per-call search configuration.

    Every constant of the merge and ranking formulas is exposed here with
    its historical default so callers can tune ranking without touching
    the algorithms.
    """

    model_config = _CAMEL_CONFIG

    # Strategy acceptance
    fuzzy_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    semantic_min_score: float = Field(default=0.1, ge=0.0)
    nlp_min_score: float = Field(default=0.1, ge=0.0)

    # Merge weights; a zero weight disables the strategy
    exact_weight: float = Field(default=0.3, ge=0.0)
    fuzzy_weight: float = Field(default=0.4, ge=0.0)
    semantic_weight: float = Field(default=0.3, ge=0.0)
    nlp_weight: float = Field(default=0.0, ge=0.0)

    # Exact matcher fields
    include_title: bool = True
    include_content: bool = True
    include_tags: bool = True

    # Semantic blend
    semantic_cosine_weight: float = Field(default=0.7, ge=0.0)
    semantic_context_weight: float = Field(default=0.3, ge=0.0)

    # Final ranking formula
    ranking_score_weight: float = Field(default=0.5, ge=0.0)
    ranking_relevance_weight: float = Field(default=0.3, ge=0.0)
    ranking_freshness_weight: float = Field(default=0.1, ge=0.0)
    ranking_popularity_weight: float = Field(default=0.1, ge=0.0)
    freshness_decay_days: float = Field(default=365.0, gt=0.0)
    popularity_saturation: int = Field(default=100, gt=0)

    # Boosts
    boost_recent: bool = True
    boost_popular: bool = True
    recency_boost: float = Field(default=0.2, ge=0.0)
    recency_window_days: float = Field(default=30.0, gt=0.0)
    popularity_boost_per_access: float = Field(default=0.01, ge=0.0)
    popularity_boost_cap: float = Field(default=0.3, ge=0.0)

    # Clustering
    enable_clustering: bool = False
    cluster_similarity_threshold: float = Field(default=0.6, ge=0.0, le=1.0)

    max_results: int = Field(default=50, ge=0)
    context_window: int = Field(default=200, ge=0)


class SearchCluster(BaseModel):
    """A greedily formed group of mutually similar results."""

    model_config = _CAMEL_CONFIG

    id: str
    name: str
    notes: list[SearchResult]
    centroid: dict[str, float] = {}
    keywords: list[str] = []


class SearchTrends(BaseModel):
    model_config = _CAMEL_CONFIG

    query_complexity: list[float] = []


class AnalyticsSummary(BaseModel):
    """Aggregate statistics over a query history."""

    model_config = _CAMEL_CONFIG

    total_queries: int = 0
    average_query_length: float = 0.0
    most_common_words: dict[str, int] = {}
    popular_searches: dict[str, int] = {}
    search_effectiveness: float = 0.0
    search_trends: SearchTrends = Field(default_factory=SearchTrends)
    average_results_per_query: float = 0.0
    zero_result_queries: list[str] = []
    average_search_time_ms: float = 0.0


def coerce_notes(notes: Iterable[Note | Mapping[str, Any]] | None) -> list[Note]:
    """Validate a caller-supplied corpus into a list of ``Note`` objects.

    ``None`` is treated as an empty corpus. Individual records that cannot
    be read as a note are skipped with a warning.

    Raises:
        InvalidNotesError: If ``notes`` is not an iterable of records.
    """
    if notes is None:
        return []
    if isinstance(notes, (str, bytes, Mapping)) or not isinstance(notes, Iterable):
        raise InvalidNotesError(f"notes must be an iterable of notes, got {type(notes).__name__}")

    result: list[Note] = []
    for index, item in enumerate(notes):
        if isinstance(item, Note):
            result.append(item)
            continue
        if not isinstance(item, Mapping):
            logger.warning("Skipping note at index %d: unsupported type %s", index, type(item).__name__)
            continue
        try:
            result.append(Note.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping malformed note at index %d: %s", index, e.errors()[0].get("msg", e))
    return result
