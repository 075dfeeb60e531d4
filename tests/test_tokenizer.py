"""Tests for the shared tokenizer and heuristic text analysis."""

from __future__ import annotations

from notesearch.constants import QueryIntent
from notesearch.search.text_analysis import (
    analyze_query,
    detect_intent,
    extract_entities,
    extract_topics,
    split_sentences,
)
from notesearch.search.tokenizer import tokenize

# ---------------------------------------------------------------------------
# tokenize
# ---------------------------------------------------------------------------


class TestTokenize:
    def test_lowercases_and_strips_punctuation(self):
        assert tokenize("Hello, World! It's a test.") == ["hello", "world", "its", "test"]

    def test_drops_short_tokens(self):
        assert tokenize("ab cd efg") == ["efg"]

    def test_keeps_underscores(self):
        assert tokenize("snake_case var") == ["snake_case", "var"]

    def test_empty_and_none(self):
        assert tokenize("") == []
        assert tokenize(None) == []
        assert tokenize("   ") == []

    def test_punctuation_only(self):
        assert tokenize("?!... ---") == []


# ---------------------------------------------------------------------------
# Entities, topics, intent
# ---------------------------------------------------------------------------


def test_extract_entities_requires_clean_capitalised_words():
    text = "Meeting with John and Mary in Paris, NASA"
    assert extract_entities(text) == ["Meeting", "John", "Mary"]


def test_split_sentences_keeps_empty_tail():
    assert split_sentences("One. Two!") == ["One", " Two", ""]


def test_extract_topics_takes_first_three_long_sentences():
    text = (
        "Short one. This sentence has five words. Another sentence with many words here! "
        "Third long sentence is right here? Fourth sentence also very long."
    )
    assert extract_topics(text) == [
        "This sentence has five words",
        "Another sentence with many words here",
        "Third long sentence is right here",
    ]


class TestDetectIntent:
    def test_question(self):
        assert detect_intent("How do I deploy") == QueryIntent.QUESTION

    def test_search(self):
        assert detect_intent("find my notes") == QueryIntent.SEARCH

    def test_create(self):
        assert detect_intent("create a todo") == QueryIntent.CREATE

    def test_general(self):
        assert detect_intent("python tips") == QueryIntent.GENERAL

    def test_question_checked_first(self):
        assert detect_intent("what to find") == QueryIntent.QUESTION

    def test_substring_containment(self):
        assert detect_intent("whatever") == QueryIntent.QUESTION


def test_analyze_query():
    analysis = analyze_query("How does Python handle memory")

    assert analysis.original == "How does Python handle memory"
    assert analysis.tokens == ["how", "does", "python", "handle", "memory"]
    assert analysis.keywords == ["does", "python", "handle", "memory"]
    assert analysis.entities == ["How", "Python"]
    assert analysis.topics == ["How does Python handle memory"]
    assert analysis.intent == QueryIntent.QUESTION
