"""Tests for note validation, options and engine state."""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from notesearch.models import InvalidNotesError, Note, SearchOptions, coerce_notes
from notesearch.state import SearchEngineState
from tests.conftest import FIXED_NOW

# ---------------------------------------------------------------------------
# Note
# ---------------------------------------------------------------------------


class TestNote:
    def test_camel_case_payload(self):
        note = Note.model_validate(
            {
                "id": 12,
                "title": "Title",
                "content": "Body text",
                "tags": ["a", None, 3],
                "updatedAt": "2026-01-01T10:00:00",
            }
        )

        assert note.id == "12"
        assert note.body == "Body text"
        assert note.tags == ["a", "3"]
        assert note.updated_at == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)
        assert note.last_modified == note.updated_at

    def test_none_fields_default(self):
        note = Note.model_validate({"id": "1", "title": None, "body": None, "tags": None})

        assert note.title == ""
        assert note.body == ""
        assert note.tags == []
        assert note.last_modified is None

    def test_id_required(self):
        with pytest.raises(ValidationError):
            Note.model_validate({"title": "No id"})

    def test_text_properties(self):
        note = Note(id="1", title="Title", body="Body", tags=["tag"])
        assert note.text == "Title Body"
        assert note.full_text == "Title Body tag"


# ---------------------------------------------------------------------------
# coerce_notes
# ---------------------------------------------------------------------------


class TestCoerceNotes:
    def test_none_is_empty(self):
        assert coerce_notes(None) == []

    @pytest.mark.parametrize("notes", [5, "notes", b"notes", {"id": "1"}])
    def test_rejects_non_collections(self, notes):
        with pytest.raises(InvalidNotesError):
            coerce_notes(notes)

    def test_invalid_notes_error_is_type_error(self):
        assert issubclass(InvalidNotesError, TypeError)

    def test_mixed_records(self):
        note = Note(id="1", title="Kept")

        result = coerce_notes([note, {"id": "2"}, {"title": "no id"}, 42, None])

        assert [n.id for n in result] == ["1", "2"]

    def test_accepts_generators(self):
        result = coerce_notes({"id": str(i)} for i in range(3))
        assert [n.id for n in result] == ["0", "1", "2"]


# ---------------------------------------------------------------------------
# SearchOptions
# ---------------------------------------------------------------------------


class TestSearchOptions:
    def test_defaults(self):
        options = SearchOptions()

        assert options.fuzzy_threshold == 0.7
        assert (options.exact_weight, options.fuzzy_weight, options.semantic_weight) == (0.3, 0.4, 0.3)
        assert options.nlp_weight == 0.0
        assert options.boost_recent and options.boost_popular
        assert not options.enable_clustering
        assert options.max_results == 50

    def test_camel_case_aliases(self):
        options = SearchOptions.model_validate({"maxResults": 5, "boostRecent": False, "fuzzyThreshold": 0.5})

        assert options.max_results == 5
        assert options.boost_recent is False
        assert options.fuzzy_threshold == 0.5

    @pytest.mark.parametrize(
        "payload",
        [{"fuzzy_threshold": 1.5}, {"max_results": -1}, {"exact_weight": -0.1}, {"freshness_decay_days": 0}],
    )
    def test_rejects_out_of_range(self, payload):
        with pytest.raises(ValidationError):
            SearchOptions(**payload)


# ---------------------------------------------------------------------------
# SearchEngineState
# ---------------------------------------------------------------------------


class TestSearchEngineState:
    def test_track_access(self):
        state = SearchEngineState()

        assert state.track_access("a") == 1
        assert state.track_access("a") == 2
        assert state.access_count("a") == 2
        assert state.access_count("missing") == 0

    def test_snapshot_is_a_copy(self):
        state = SearchEngineState()
        state.track_access("a")

        snapshot = state.snapshot()
        state.track_access("a")

        assert snapshot == {"a": 1}

    def test_concurrent_increments(self):
        state = SearchEngineState()

        def _worker():
            for _ in range(1000):
                state.track_access("shared")

        threads = [threading.Thread(target=_worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert state.access_count("shared") == 8000

    def test_injected_clock(self):
        assert SearchEngineState(clock=lambda: FIXED_NOW).now() == FIXED_NOW

    def test_default_clock_has_day_resolution(self):
        now = SearchEngineState().now()

        assert now.tzinfo is not None
        assert (now.hour, now.minute, now.second, now.microsecond) == (0, 0, 0, 0)
        assert now.date() in {datetime.now(UTC).date(), (datetime.now(UTC) - timedelta(days=1)).date()}
