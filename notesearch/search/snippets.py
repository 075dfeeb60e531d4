"""Context snippets and match highlighting."""

from __future__ import annotations

import re

from notesearch.constants import EXACT_EXCERPT_PADDING
from notesearch.models import Note


def extract_context(query: str, note: Note, max_length: int = 200) -> str:
    """Return up to ``max_length`` characters of title+body around *query*.

    Falls back to the note title when the query does not occur verbatim.
    """
    text = note.text
    index = text.lower().find(query.lower()) if query else -1
    if index == -1:
        return note.title
    half = max_length // 2
    start = max(0, index - half)
    end = min(len(text), index + len(query) + half)
    return text[start:end]


def extract_exact_match(content: str, query: str, padding: int = EXACT_EXCERPT_PADDING) -> str:
    """Return the first occurrence of *query* in *content* with ``padding`` chars either side."""
    index = content.lower().find(query.lower())
    if index == -1:
        return ""
    start = max(0, index - padding)
    end = min(len(content), index + len(query) + padding)
    return content[start:end]


def highlight_search_terms(text: str, query: str) -> str:
    """Wrap every occurrence of each query word in ``<mark>`` tags.

    Matching is case-insensitive and the original casing is kept.
    """
    words = [word for word in query.lower().split() if word]
    if not words:
        return text
    # Longest first so "java" does not split a later "javascript" match.
    pattern = re.compile(
        "|".join(re.escape(word) for word in sorted(set(words), key=len, reverse=True)),
        re.IGNORECASE,
    )
    return pattern.sub(lambda m: f"<mark>{m.group(0)}</mark>", text)
