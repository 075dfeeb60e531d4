"""Search API endpoints.

Provides:
- ``POST /search`` -- Search a supplied corpus with one strategy or all of them.
- ``POST /search/clusters`` -- Combined search grouped into similarity clusters.
- ``POST /search/suggestions`` -- Autocomplete suggestions.
- ``POST /search/analytics`` -- Statistics over a supplied query history.
- ``POST /notes/{note_id}/access`` -- Record that a note was opened.

The corpus travels with each request; the server keeps only the access
counters, held by the ``SearchService`` on ``app.state``. Searches are
CPU-bound and run in a worker thread so the event loop stays responsive.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from notesearch.models import (
    AnalyticsSummary,
    InvalidNotesError,
    Note,
    SearchCluster,
    SearchOptions,
    SearchResult,
)
from notesearch.services.search_service import SearchService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


# ---------------------------------------------------------------------------
# Enums & Request / Response schemas
# ---------------------------------------------------------------------------


class SearchType(str, Enum):
    """Supported search types."""

    combined = "combined"
    exact = "exact"
    fuzzy = "fuzzy"
    semantic = "semantic"
    nlp = "nlp"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchRequest(_CamelModel):
    query: str = ""
    notes: list[Note] = []
    options: SearchOptions = Field(default_factory=SearchOptions)
    type: SearchType = SearchType.combined


class SearchResponse(_CamelModel):
    """Search API response containing results and metadata."""

    results: list[SearchResult]
    query: str
    search_type: str
    total: int


class ClustersResponse(_CamelModel):
    clusters: list[SearchCluster]
    total: int


class SuggestionsRequest(_CamelModel):
    query: str = ""
    notes: list[Note] = []


class SuggestionsResponse(_CamelModel):
    suggestions: list[str]


class AnalyticsRequest(_CamelModel):
    queries: list[str] = []
    notes: list[Note] = []
    options: SearchOptions | None = None


class AccessResponse(_CamelModel):
    note_id: str
    access_count: int


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_search_service(request: Request) -> SearchService:
    """Return the SearchService owned by the running application."""
    return request.app.state.search_service


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


def _run_search(service: SearchService, body: SearchRequest) -> list[SearchResult]:
    if body.type == SearchType.exact:
        results = service.exact_search(body.query, body.notes, body.options)
    elif body.type == SearchType.fuzzy:
        results = service.fuzzy_search(body.query, body.notes, options=body.options)
    elif body.type == SearchType.semantic:
        results = service.semantic_search(body.query, body.notes, body.options)
    elif body.type == SearchType.nlp:
        results = service.nlp_search(body.query, body.notes, body.options)
    else:
        return service.combined_search(body.query, body.notes, body.options)
    return results[: body.options.max_results]


@router.post("/search", response_model=SearchResponse)
async def search_notes(
    body: SearchRequest,
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Search the supplied notes.

    ``type=combined`` (default) merges every strategy with the weights in
    ``options``; the other types run a single strategy.
    """
    try:
        results = await asyncio.to_thread(_run_search, service, body)
    except InvalidNotesError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    return SearchResponse(
        results=results,
        query=body.query,
        search_type=body.type.value,
        total=len(results),
    )


@router.post("/search/clusters", response_model=ClustersResponse)
async def search_clusters(
    body: SearchRequest,
    service: SearchService = Depends(get_search_service),
) -> ClustersResponse:
    """Run a combined search and group its results into clusters."""

    def _cluster() -> list[SearchCluster]:
        results = service.combined_search(body.query, body.notes, body.options)
        return service.get_search_clusters(results, body.options)

    clusters = await asyncio.to_thread(_cluster)
    return ClustersResponse(clusters=clusters, total=len(clusters))


@router.post("/search/suggestions", response_model=SuggestionsResponse)
async def search_suggestions(
    body: SuggestionsRequest,
    service: SearchService = Depends(get_search_service),
) -> SuggestionsResponse:
    suggestions = await asyncio.to_thread(service.get_search_suggestions, body.query, body.notes)
    return SuggestionsResponse(suggestions=suggestions)


@router.post("/search/analytics", response_model=AnalyticsSummary)
async def search_analytics(
    body: AnalyticsRequest,
    service: SearchService = Depends(get_search_service),
) -> AnalyticsSummary:
    """Summarise a query history supplied by the client (not stored)."""
    return await asyncio.to_thread(service.get_search_analytics, body.queries, body.notes, body.options)


@router.post("/notes/{note_id}/access", response_model=AccessResponse)
async def track_note_access(
    note_id: str,
    service: SearchService = Depends(get_search_service),
) -> AccessResponse:
    """Record that a note was opened; feeds popularity ranking."""
    count = service.track_note_access(note_id)
    return AccessResponse(note_id=note_id, access_count=count)
