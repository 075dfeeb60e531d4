"""Heuristic entity, topic and intent extraction.

These helpers are regex and keyword guesses, not a trained language model:
an "entity" is any capitalised word, a "topic" is any sentence longer than
three words, and intent is decided by keyword containment. Callers must not
treat the output as linguistically correct.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from notesearch.constants import INTENT_KEYWORDS, QueryIntent
from notesearch.models import Note
from notesearch.search.tokenizer import tokenize

_ENTITY_RE = re.compile(r"^[A-Z][a-z]+$")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_MAX_TOPICS = 3
_KEYWORD_MIN_LENGTH = 4


class QueryAnalysis(NamedTuple):
    """Result of analysing a search query.

    Attributes:
        original: The query as given.
        tokens: Output of ``tokenize``.
        keywords: Tokens longer than three characters.
        entities: Capitalised words.
        topics: Sentence-like spans of the query.
        intent: Heuristic intent classification.
    """

    original: str
    tokens: list[str]
    keywords: list[str]
    entities: list[str]
    topics: list[str]
    intent: QueryIntent


class NoteAnalysis(NamedTuple):
    keywords: list[str]
    entities: list[str]
    topics: list[str]
    tags: list[str]


def split_sentences(text: str) -> list[str]:
    """Split on runs of sentence terminators; pieces are not stripped."""
    return _SENTENCE_SPLIT_RE.split(text)


def extract_entities(text: str) -> list[str]:
    """Return whitespace-delimited words that look like proper nouns.

    Words with trailing punctuation ("Python,") are not entities.
    """
    return [word for word in text.split() if _ENTITY_RE.match(word)]


def extract_topics(text: str) -> list[str]:
    """Return up to three stripped sentences containing more than three words."""
    topics: list[str] = []
    for sentence in split_sentences(text):
        if len(sentence.split()) > 3:
            topics.append(sentence.strip())
            if len(topics) == _MAX_TOPICS:
                break
    return topics


def detect_intent(text: str) -> QueryIntent:
    """Classify *text* as question, search, create or general.

    Matching is plain substring containment, so "whatever" reads as a
    question and "address" as create.
    """
    lowered = text.lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return QueryIntent.GENERAL


def analyze_query(query: str) -> QueryAnalysis:
    """Bundle tokens, keywords, entities, topics and intent of *query*."""
    tokens = tokenize(query)
    return QueryAnalysis(
        original=query,
        tokens=tokens,
        keywords=[t for t in tokens if len(t) >= _KEYWORD_MIN_LENGTH],
        entities=extract_entities(query),
        topics=extract_topics(query),
        intent=detect_intent(query),
    )


def analyze_note(note: Note) -> NoteAnalysis:
    text = note.text
    return NoteAnalysis(
        keywords=[t for t in tokenize(text) if len(t) >= _KEYWORD_MIN_LENGTH],
        entities=extract_entities(text),
        topics=extract_topics(text),
        tags=note.tags,
    )
