"""Shared fixtures: a fixed clock, note builders, and the sample corpus."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notesearch.models import Note
from notesearch.services.search_service import SearchService
from notesearch.state import SearchEngineState

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def make_note(
    note_id: str,
    title: str = "",
    body: str = "",
    tags: list[str] | None = None,
    age_days: float | None = 0,
) -> Note:
    """Build a Note last updated ``age_days`` before FIXED_NOW (undated if None)."""
    updated = FIXED_NOW - timedelta(days=age_days) if age_days is not None else None
    return Note(
        id=note_id,
        title=title,
        body=body,
        tags=tags or [],
        created_at=updated,
        updated_at=updated,
    )


@pytest.fixture
def python_note() -> Note:
    return make_note(
        "1",
        "Python Basics",
        "Introduction to Python programming language.",
        ["python", "basics", "programming"],
    )


@pytest.fixture
def javascript_note() -> Note:
    return make_note(
        "2",
        "JavaScript Programming Guide",
        "Learn JavaScript programming with examples.",
        ["javascript", "programming", "guide"],
    )


@pytest.fixture
def cooking_note() -> Note:
    return make_note("3", "Cooking Pasta", "Boil water and add salt.", ["food"])


@pytest.fixture
def programming_notes(python_note: Note, javascript_note: Note) -> list[Note]:
    return [python_note, javascript_note]


@pytest.fixture
def state() -> SearchEngineState:
    return SearchEngineState(clock=lambda: FIXED_NOW)


@pytest.fixture
def search_service(state: SearchEngineState) -> SearchService:
    return SearchService(state)


@pytest_asyncio.fixture(scope="function")
async def test_client(search_service: SearchService) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client bound to a fresh search service."""
    from notesearch.main import app

    app.state.search_service = search_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
