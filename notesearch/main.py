"""FastAPI application hosting the search core."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notesearch import __version__
from notesearch.config import get_settings
from notesearch.services.search_service import SearchService
from notesearch.state import SearchEngineState

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the engine state on startup; it is discarded on shutdown."""
    logging.basicConfig(level=get_settings().LOG_LEVEL.upper())
    app.state.search_service = SearchService(SearchEngineState())
    logger.info("Search service started")
    yield
    logger.info("Search service stopped")


app = FastAPI(
    title="notesearch",
    description="Multi-strategy search and ranking over personal notes",
    version=__version__,
    lifespan=lifespan,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Router includes ---
from notesearch.api.search import router as search_router  # noqa: E402

app.include_router(search_router, prefix="/api")


@app.get("/api/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns a simple status response to verify the API is running.
    """
    return {"status": "ok"}
