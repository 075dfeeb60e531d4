"""Autocomplete-style search suggestions drawn from the corpus."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from notesearch.config import get_settings
from notesearch.constants import CONTEXTUAL_SUGGESTION_LIMIT
from notesearch.models import Note, coerce_notes
from notesearch.search.text_analysis import split_sentences
from notesearch.search.tokenizer import tokenize

logger = logging.getLogger(__name__)

_PHRASE_MIN_WORDS = 3
_PHRASE_MAX_WORDS = 6
_PHRASE_MIN_CHARS = 10
_PHRASE_MAX_CHARS = 100
_WORD_MIN_LENGTH = 4


def get_search_suggestions(
    query: str | None,
    notes: Iterable[Note | Mapping[str, Any]] | None,
    limit: int | None = None,
) -> list[str]:
    """Suggest completions for a partial query.

    Sources, in order: note titles containing the query, ``#tag`` for tags
    containing it, body words (longer than three characters) containing it,
    and up to five short phrases from notes that mention a query token.
    Duplicates are removed keeping the first occurrence.

    Args:
        query: Partial query typed by the user.
        notes: Notes or raw note records; ``None`` is an empty corpus.
        limit: Maximum suggestions (default ``SUGGESTION_LIMIT``, 15).

    Returns:
        Suggestion strings; empty for a blank query.
    """
    notes = coerce_notes(notes)
    if query is None or not query.strip():
        return []
    if limit is None:
        limit = get_settings().SUGGESTION_LIMIT
    query_lower = query.lower()
    suggestions: list[str] = []

    for note in notes:
        if query_lower in note.title.lower() and note.title != query:
            suggestions.append(note.title)

    all_tags = dict.fromkeys(tag for note in notes for tag in note.tags)
    suggestions.extend(f"#{tag}" for tag in all_tags if query_lower in tag.lower())

    words = dict.fromkeys(word for note in notes for word in tokenize(note.body))
    suggestions.extend(word for word in words if query_lower in word and len(word) >= _WORD_MIN_LENGTH)

    suggestions.extend(contextual_suggestions(query, notes))

    unique = list(dict.fromkeys(suggestions))[:limit]
    logger.debug("Suggestions: query=%r count=%d", query, len(unique))
    return unique


def contextual_suggestions(query: str, notes: Sequence[Note]) -> list[str]:
    """Short phrases (3-6 words) from sentences of notes that mention a query token."""
    query_tokens = tokenize(query)
    if not query_tokens:
        return []

    phrases: list[str] = []
    for note in notes:
        text = note.text.lower()
        if not any(token in text for token in query_tokens):
            continue
        for sentence in split_sentences(note.body):
            words = sentence.split()
            if not _PHRASE_MIN_WORDS <= len(words) <= _PHRASE_MAX_WORDS:
                continue
            phrase = " ".join(words)
            if _PHRASE_MIN_CHARS < len(phrase) < _PHRASE_MAX_CHARS:
                phrases.append(phrase)
                if len(phrases) == CONTEXTUAL_SUGGESTION_LIMIT:
                    return phrases
    return phrases
