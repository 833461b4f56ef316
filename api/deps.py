"""
Dependency injection for the document store, repositories and other shared resources.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends
from fastapi.responses import JSONResponse

from movie_explorer.db import DocumentStore, create_document_store
from movie_explorer.ingestion.poster_backfill import MovieDetailsFetcher
from movie_explorer.integrations.tmdb.client import fetch_movie_details
from movie_explorer.repositories import ReviewRepository, WatchlistRepository
from movie_explorer.utils.env import load_env

# Load environment variables if running standalone
load_env()

logger = logging.getLogger(__name__)


@lru_cache
def get_document_store() -> DocumentStore:
    """
    Returns the process-wide document store (Firestore unless
    DOCUMENT_STORE_BACKEND=memory).
    """
    return create_document_store()


def get_review_repository(store: Annotated[DocumentStore, Depends(get_document_store)]) -> ReviewRepository:
    return ReviewRepository(store)


def get_watchlist_repository(store: Annotated[DocumentStore, Depends(get_document_store)]) -> WatchlistRepository:
    return WatchlistRepository(store)


def get_movie_details_fetcher() -> MovieDetailsFetcher:
    """
    Returns the TMDb lookup used by the poster backfill pass.
    Only the base movie payload is needed, so nothing is appended.
    """

    def fetch(movie_id: int) -> Mapping[str, Any]:
        return fetch_movie_details(movie_id, append_to_response=None)

    return fetch


# Type aliases for dependency injection
Store = Annotated[DocumentStore, Depends(get_document_store)]
Reviews = Annotated[ReviewRepository, Depends(get_review_repository)]
Watchlist = Annotated[WatchlistRepository, Depends(get_watchlist_repository)]
MovieDetailsLookup = Annotated[MovieDetailsFetcher, Depends(get_movie_details_fetcher)]


def error_response(status_code: int, message: str) -> JSONResponse:
    """
    Build the JSON error envelope used by every route: `{"error": <message>}`.
    """
    return JSONResponse(status_code=status_code, content={"error": message})
