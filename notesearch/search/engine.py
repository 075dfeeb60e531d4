"""Exact, fuzzy, semantic, NLP and combined search engines.

Exact: case-insensitive substring match of the raw query in title/body/tags.
Fuzzy: per-token Levenshtein similarity, weighted over title/body/tags.
Semantic: term-frequency cosine similarity blended with heuristic context.
NLP: keyword/entity/tag overlap blended with a heuristic intent table.
Combined: weighted sum of the strategies per note, then the ranking formula,
boosts, optional clustering, sort and truncation.

Each strategy scans the corpus on every call; nothing is indexed between
calls. Strategies are pure functions of their inputs and may run in
parallel.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any

from notesearch.config import get_settings
from notesearch.constants import (
    ENTITY_MATCH_WEIGHT,
    EXACT_CONTENT_WEIGHT,
    EXACT_TAG_WEIGHT,
    EXACT_TITLE_WEIGHT,
    FUZZY_CONTENT_WEIGHT,
    FUZZY_HIGHLIGHT_THRESHOLD,
    FUZZY_TAG_WEIGHT,
    FUZZY_TITLE_WEIGHT,
    MAX_HIGHLIGHTS,
    NLP_ENTITY_SCORE_WEIGHT,
    NLP_ENTITY_WEIGHT,
    NLP_INTENT_SCORE_WEIGHT,
    NLP_KEYWORD_WEIGHT,
    NLP_QUESTION_BONUS,
    NLP_SHORT_BODY_CHARS,
    NLP_SUBSCORE_WEIGHT,
    NLP_TAG_WEIGHT,
    QUESTION_TOPIC_BONUS,
    SEMANTIC_HIGHLIGHT_THRESHOLD,
    TOPIC_MATCH_WEIGHT,
    MatchType,
    QueryIntent,
)
from notesearch.models import (
    MatchExplanation,
    Note,
    SearchOptions,
    SearchResult,
    StrategyContribution,
    coerce_notes,
)
from notesearch.search.clustering import ClusteringStrategy, GreedyClustering, apply_clustering
from notesearch.search.distance import EditDistanceStrategy, LevenshteinDistance
from notesearch.search.ranking import rank_results, sort_results
from notesearch.search.snippets import extract_context, extract_exact_match
from notesearch.search.text_analysis import (
    QueryAnalysis,
    analyze_note,
    analyze_query,
    extract_entities,
    extract_topics,
    split_sentences,
)
from notesearch.search.tokenizer import tokenize
from notesearch.search.vectors import cosine_similarity, note_vector, term_vector
from notesearch.state import utc_today

logger = logging.getLogger(__name__)


def normalize_query(query: str | None) -> str:
    """Return a usable query string.

    ``None`` and whitespace-only queries become ``""``; queries longer than
    ``MAX_QUERY_LENGTH`` are truncated.
    """
    if query is None or not query.strip():
        return ""
    max_length = get_settings().MAX_QUERY_LENGTH
    if len(query) > max_length:
        logger.warning("Query of %d characters truncated to %d", len(query), max_length)
        return query[:max_length]
    return query


# ---------------------------------------------------------------------------
# Strategy engines
# ---------------------------------------------------------------------------


class ExactSearchEngine:
    """Case-insensitive substring matching of the untokenized query.

    Multi-word phrases are honoured as-is. Field weights: title 1.0,
    body 0.8, any tag 0.6.
    """

    def search(
        self,
        query: str | None,
        notes: Sequence[Note],
        include_title: bool = True,
        include_content: bool = True,
        include_tags: bool = True,
        context_window: int = 200,
    ) -> list[SearchResult]:
        query = normalize_query(query)
        if not query:
            return []
        query_lower = query.lower()

        results: list[SearchResult] = []
        for note in notes:
            score = 0.0
            highlights: list[str] = []

            if include_title and query_lower in note.title.lower():
                score += EXACT_TITLE_WEIGHT
                highlights.append(f"Title: {note.title}")

            if include_content and query_lower in note.body.lower():
                score += EXACT_CONTENT_WEIGHT
                highlights.append(f"Content: {extract_exact_match(note.body, query)}")

            if include_tags:
                matching_tags = [tag for tag in note.tags if query_lower in tag.lower()]
                if matching_tags:
                    score += EXACT_TAG_WEIGHT
                    highlights.append(f"Tags: {', '.join(matching_tags)}")

            if score > 0:
                results.append(
                    SearchResult(
                        note=note,
                        score=score,
                        highlights=highlights,
                        context=extract_context(query, note, context_window),
                        match_type=MatchType.EXACT,
                    )
                )

        logger.debug("Exact search: query=%r matched=%d/%d", query, len(results), len(notes))
        return sort_results(results)


class FuzzySearchEngine:
    """Typo-tolerant matching using token edit distance.

    For each field the score is the mean, over query tokens, of the best
    ``1 - distance / max_len`` against the field's tokens. Fields are
    weighted title 0.4, body 0.4, best tag 0.2.

    Args:
        edit_distance: Distance strategy (default: capped Levenshtein).
    """

    def __init__(self, edit_distance: EditDistanceStrategy | None = None) -> None:
        self._edit_distance = edit_distance or LevenshteinDistance()

    def field_score(self, query_tokens: list[str], text: str) -> float:
        return self._edit_distance.best_match_score(query_tokens, tokenize(text))

    def search(
        self,
        query: str | None,
        notes: Sequence[Note],
        threshold: float = 0.7,
        context_window: int = 200,
    ) -> list[SearchResult]:
        query = normalize_query(query)
        query_tokens = tokenize(query)
        if not query_tokens:
            return []

        results: list[SearchResult] = []
        for note in notes:
            title_score = self.field_score(query_tokens, note.title)
            content_score = self.field_score(query_tokens, note.body)
            tag_score = max((self.field_score(query_tokens, tag) for tag in note.tags), default=0.0)

            weighted = (
                title_score * FUZZY_TITLE_WEIGHT
                + content_score * FUZZY_CONTENT_WEIGHT
                + tag_score * FUZZY_TAG_WEIGHT
            )
            if weighted >= threshold:
                results.append(
                    SearchResult(
                        note=note,
                        score=weighted,
                        highlights=self._highlights(query_tokens, note, title_score),
                        context=extract_context(query, note, context_window),
                        match_type=MatchType.FUZZY,
                    )
                )

        logger.debug("Fuzzy search: query=%r threshold=%.2f matched=%d", query, threshold, len(results))
        return sort_results(results)

    def _highlights(self, query_tokens: list[str], note: Note, title_score: float) -> list[str]:
        highlights: list[str] = []
        if title_score > FUZZY_HIGHLIGHT_THRESHOLD:
            highlights.append(f"Title: {note.title}")
        for sentence in split_sentences(note.body):
            if len(highlights) >= MAX_HIGHLIGHTS:
                break
            if self.field_score(query_tokens, sentence) > FUZZY_HIGHLIGHT_THRESHOLD:
                highlights.append(f"Content: {sentence.strip()}")
        return highlights[:MAX_HIGHLIGHTS]


class SemanticSearchEngine:
    """Bag-of-words cosine similarity blended with heuristic context similarity.

    ``score = cosine_weight * cosine + context_weight * context`` where the
    context similarity rewards shared capitalised words, shared topics and
    question-style queries against notes that contain full sentences. The
    "semantics" are lexical; no embedding model is involved.

    Args:
        max_vector_terms: Dimensionality cap for term vectors (default from settings).
    """

    def __init__(self, max_vector_terms: int | None = None) -> None:
        self._max_vector_terms = max_vector_terms

    def search(
        self,
        query: str | None,
        notes: Sequence[Note],
        cosine_weight: float = 0.7,
        context_weight: float = 0.3,
        min_score: float = 0.1,
        context_window: int = 200,
    ) -> list[SearchResult]:
        query = normalize_query(query)
        analysis = analyze_query(query)
        if not analysis.tokens:
            return []
        query_vector = term_vector(analysis.tokens, self._max_vector_terms)

        results: list[SearchResult] = []
        for note in notes:
            similarity = cosine_similarity(query_vector, note_vector(note, self._max_vector_terms))
            context_similarity = self.context_similarity(analysis, note)
            score = similarity * cosine_weight + context_similarity * context_weight
            if score > min_score:
                results.append(
                    SearchResult(
                        note=note,
                        score=score,
                        highlights=self._highlights(query_vector, note),
                        context=extract_context(query, note, context_window),
                        match_type=MatchType.SEMANTIC,
                    )
                )

        logger.debug("Semantic search: query=%r matched=%d", query, len(results))
        return sort_results(results)

    @staticmethod
    def context_similarity(analysis: QueryAnalysis, note: Note) -> float:
        """Heuristic overlap of entities, topics and question intent, capped at 1.0."""
        score = 0.0

        note_entities = set(extract_entities(note.text))
        score += sum(1 for entity in analysis.entities if entity in note_entities) * ENTITY_MATCH_WEIGHT

        note_topics = extract_topics(note.body)
        topic_matches = sum(
            1 for topic in analysis.topics if any(topic in note_topic for note_topic in note_topics)
        )
        score += topic_matches * TOPIC_MATCH_WEIGHT

        if analysis.intent == QueryIntent.QUESTION and note_topics:
            score += QUESTION_TOPIC_BONUS

        return min(score, 1.0)

    def _highlights(self, query_vector: dict[str, float], note: Note) -> list[str]:
        highlights: list[str] = []
        for sentence in split_sentences(note.text):
            sentence_vector = term_vector(tokenize(sentence), self._max_vector_terms)
            if cosine_similarity(query_vector, sentence_vector) > SEMANTIC_HIGHLIGHT_THRESHOLD:
                highlights.append(f"Content: {sentence.strip()}")
                if len(highlights) == MAX_HIGHLIGHTS:
                    break
        return highlights


class NLPSearchEngine:
    """Keyword, entity and intent heuristics scored as a pseudo-NLP strategy.

    Entities are capitalised words and intent is keyword-based (see
    ``notesearch.search.text_analysis``); neither is linguistically
    reliable. Because the intent table alone can clear the score floor for
    "search"-style queries, this strategy tends to match broadly and is
    disabled in combined search unless ``nlp_weight`` is set.
    """

    def search(
        self,
        query: str | None,
        notes: Sequence[Note],
        min_score: float = 0.1,
        context_window: int = 200,
    ) -> list[SearchResult]:
        query = normalize_query(query)
        analysis = analyze_query(query)
        if not analysis.tokens:
            return []

        results: list[SearchResult] = []
        for note in notes:
            nlp_score = self.nlp_score(analysis, note)
            entity_score = self.entity_score(analysis.entities, note)
            intent_score = self.intent_score(analysis.intent, note)

            score = (
                nlp_score * NLP_SUBSCORE_WEIGHT
                + entity_score * NLP_ENTITY_SCORE_WEIGHT
                + intent_score * NLP_INTENT_SCORE_WEIGHT
            )
            if score > min_score:
                results.append(
                    SearchResult(
                        note=note,
                        score=score,
                        highlights=self._highlights(analysis, note),
                        context=extract_context(query, note, context_window),
                        match_type=MatchType.NLP,
                    )
                )

        logger.debug("NLP search: query=%r intent=%s matched=%d", query, analysis.intent, len(results))
        return sort_results(results)

    @staticmethod
    def nlp_score(analysis: QueryAnalysis, note: Note) -> float:
        note_analysis = analyze_note(note)
        note_keywords = set(note_analysis.keywords)
        note_entities = set(note_analysis.entities)
        lowered_tags = [tag.lower() for tag in note_analysis.tags]

        score = sum(1 for kw in analysis.keywords if kw in note_keywords) * NLP_KEYWORD_WEIGHT
        score += sum(1 for entity in analysis.entities if entity in note_entities) * NLP_ENTITY_WEIGHT
        score += sum(1 for kw in analysis.keywords if any(kw in tag for tag in lowered_tags)) * NLP_TAG_WEIGHT
        if analysis.intent == QueryIntent.QUESTION and note_analysis.topics:
            score += NLP_QUESTION_BONUS
        return min(score, 1.0)

    @staticmethod
    def entity_score(query_entities: list[str], note: Note) -> float:
        """Fraction of query entities that also appear in the note."""
        note_entities = set(extract_entities(note.text))
        matches = sum(1 for entity in query_entities if entity in note_entities)
        return matches / max(len(query_entities), 1)

    @staticmethod
    def intent_score(intent: QueryIntent, note: Note) -> float:
        """How well the note suits the query intent.

        Question queries favour notes with full sentences; create queries
        favour short notes (body of at most 100 characters).
        """
        if intent == QueryIntent.QUESTION:
            return 0.8 if extract_topics(note.body) else 0.2
        if intent == QueryIntent.SEARCH:
            return 0.6
        if intent == QueryIntent.CREATE:
            return 0.4 if len(note.body) > NLP_SHORT_BODY_CHARS else 0.8
        return 0.5

    @staticmethod
    def _highlights(analysis: QueryAnalysis, note: Note) -> list[str]:
        highlights: list[str] = []
        for entity in analysis.entities:
            if entity in note.title:
                highlights.append(f"Title: {note.title}")
            if entity in note.body:
                highlights.append(f"Content: {extract_context(entity, note)}")
        return highlights[:MAX_HIGHLIGHTS]


# ---------------------------------------------------------------------------
# Combined search
# ---------------------------------------------------------------------------


class CombinedSearchEngine:
    """Runs every enabled strategy and merges them into one ranked list.

    Pipeline: strategies (exact, fuzzy, semantic, nlp) → weighted merge →
    relevance/freshness/popularity ranking → boosts → optional clustering →
    stable sort → truncation to ``max_results``.

    Args:
        exact: Exact engine (default instance if omitted).
        fuzzy: Fuzzy engine.
        semantic: Semantic engine.
        nlp: NLP engine.
        clustering: Clustering strategy used when ``enable_clustering`` is set.
    """

    def __init__(
        self,
        exact: ExactSearchEngine | None = None,
        fuzzy: FuzzySearchEngine | None = None,
        semantic: SemanticSearchEngine | None = None,
        nlp: NLPSearchEngine | None = None,
        clustering: ClusteringStrategy | None = None,
    ) -> None:
        self._exact = exact or ExactSearchEngine()
        self._fuzzy = fuzzy or FuzzySearchEngine()
        self._semantic = semantic or SemanticSearchEngine()
        self._nlp = nlp or NLPSearchEngine()
        self._clustering = clustering

    def search(
        self,
        query: str | None,
        notes: Sequence[Note],
        options: SearchOptions | None = None,
        access_counts: Mapping[str, int] | None = None,
        now: datetime | None = None,
    ) -> list[SearchResult]:
        """Execute a combined search.

        Args:
            query: Free-text query; blank or ``None`` yields no results.
            notes: Validated corpus.
            options: Search options (defaults if omitted).
            access_counts: Read-only snapshot of note access counts.
            now: Reference time for freshness and recency; read once per call.

        Returns:
            Ranked results, at most ``options.max_results``.
        """
        options = options or SearchOptions()
        access_counts = access_counts or {}
        now = now or utc_today()
        query = normalize_query(query)
        if not query or not notes:
            return []

        started = time.perf_counter()
        notes = unique_by_id(notes)
        runs = self._run_strategies(query, notes, options)
        merged = self.merge(runs)

        ranked = rank_results(merged, tokenize(query), options, access_counts, now)
        ranked = sort_results(ranked)
        if options.enable_clustering:
            strategy = self._clustering or GreedyClustering(options.cluster_similarity_threshold)
            ranked = apply_clustering(ranked, strategy)

        final = ranked[: options.max_results]
        logger.info(
            "Combined search: query=%r notes=%d strategies=%s merged=%d returned=%d duration_ms=%.1f",
            query,
            len(notes),
            "/".join(f"{strategy}:{len(results)}" for strategy, _, results in runs),
            len(merged),
            len(final),
            (time.perf_counter() - started) * 1000,
        )
        return final

    def _run_strategies(
        self,
        query: str | None,
        notes: Sequence[Note],
        options: SearchOptions,
    ) -> list[tuple[MatchType, float, list[SearchResult]]]:
        runs: list[tuple[MatchType, float, list[SearchResult]]] = []
        if options.exact_weight > 0:
            runs.append(
                (
                    MatchType.EXACT,
                    options.exact_weight,
                    self._exact.search(
                        query,
                        notes,
                        include_title=options.include_title,
                        include_content=options.include_content,
                        include_tags=options.include_tags,
                        context_window=options.context_window,
                    ),
                )
            )
        if options.fuzzy_weight > 0:
            runs.append(
                (
                    MatchType.FUZZY,
                    options.fuzzy_weight,
                    self._fuzzy.search(query, notes, options.fuzzy_threshold, options.context_window),
                )
            )
        if options.semantic_weight > 0:
            runs.append(
                (
                    MatchType.SEMANTIC,
                    options.semantic_weight,
                    self._semantic.search(
                        query,
                        notes,
                        cosine_weight=options.semantic_cosine_weight,
                        context_weight=options.semantic_context_weight,
                        min_score=options.semantic_min_score,
                        context_window=options.context_window,
                    ),
                )
            )
        if options.nlp_weight > 0:
            runs.append(
                (
                    MatchType.NLP,
                    options.nlp_weight,
                    self._nlp.search(
                        query,
                        notes,
                        min_score=options.nlp_min_score,
                        context_window=options.context_window,
                    ),
                )
            )
        return runs

    @staticmethod
    def merge(runs: Iterable[tuple[MatchType, float, list[SearchResult]]]) -> list[SearchResult]:
        """Union per-strategy results by note id.

        Scores are summed after weighting; highlights are concatenated in
        strategy order without de-duplication. The first strategy to find a
        note fixes its ``match_type`` and ``context``.
        """
        merged: dict[str, SearchResult] = {}
        contributions: dict[str, list[StrategyContribution]] = {}

        for strategy, weight, results in runs:
            for result in results:
                note_id = result.note.id
                weighted = result.score * weight
                contribution = StrategyContribution(
                    strategy=strategy,
                    raw_score=result.score,
                    weight=weight,
                    weighted_score=weighted,
                )
                existing = merged.get(note_id)
                if existing is None:
                    merged[note_id] = result.model_copy(
                        update={"score": weighted, "highlights": list(result.highlights)}
                    )
                    contributions[note_id] = [contribution]
                else:
                    existing.score += weighted
                    existing.highlights = [*existing.highlights, *result.highlights]
                    contributions[note_id].append(contribution)

        for note_id, result in merged.items():
            result.match_explanation = MatchExplanation(
                contributions=contributions[note_id],
                merged_score=result.score,
            )
        return list(merged.values())


def unique_by_id(notes: Sequence[Note]) -> list[Note]:
    """Drop notes whose id was already seen; the first occurrence wins."""
    seen: dict[str, Note] = {}
    for note in notes:
        if note.id in seen:
            logger.warning("Duplicate note id %r in corpus; keeping the first occurrence", note.id)
            continue
        seen[note.id] = note
    return list(seen.values())


# ---------------------------------------------------------------------------
# Module-level entry points
# ---------------------------------------------------------------------------


def exact_search(
    query: str | None,
    notes: Iterable[Note | Mapping[str, Any]] | None,
    include_title: bool = True,
    include_content: bool = True,
    include_tags: bool = True,
    context_window: int = 200,
) -> list[SearchResult]:
    """Exact substring search over raw note records."""
    return ExactSearchEngine().search(
        query,
        unique_by_id(coerce_notes(notes)),
        include_title=include_title,
        include_content=include_content,
        include_tags=include_tags,
        context_window=context_window,
    )


def fuzzy_search(
    query: str | None,
    notes: Iterable[Note | Mapping[str, Any]] | None,
    threshold: float = 0.7,
) -> list[SearchResult]:
    """Fuzzy (edit-distance tolerant) search over raw note records."""
    return FuzzySearchEngine().search(query, unique_by_id(coerce_notes(notes)), threshold)


def semantic_search(
    query: str | None,
    notes: Iterable[Note | Mapping[str, Any]] | None,
) -> list[SearchResult]:
    """Term-vector semantic search over raw note records."""
    return SemanticSearchEngine().search(query, unique_by_id(coerce_notes(notes)))


def nlp_search(
    query: str | None,
    notes: Iterable[Note | Mapping[str, Any]] | None,
) -> list[SearchResult]:
    """Heuristic NLP search over raw note records."""
    return NLPSearchEngine().search(query, unique_by_id(coerce_notes(notes)))
