"""
Read-only proxy endpoints for TMDb movie metadata.

Each route forwards to the TMDb client and returns the upstream JSON body
verbatim. Failures become `{"error": <message>}` with HTTP 500.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Query

from api.deps import error_response
from movie_explorer.integrations.tmdb.client import (
    fetch_movie_details,
    fetch_movies_by_category,
    fetch_trending_movies,
    search_movies,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movies", tags=["movies"])


def _forward(fetch: Callable[[], dict[str, Any]], *, context: str, failure_message: str) -> Any:
    try:
        return fetch()
    except RuntimeError as exc:
        # TmdbClientError, or TMDB_API_KEY missing
        logger.error(f"Error fetching {context}: {exc}")
        return error_response(500, failure_message)


@router.get("/trending")
def trending_movies() -> Any:
    """Weekly trending movies."""
    return _forward(
        fetch_trending_movies,
        context="trending movies",
        failure_message="Failed to fetch trending movies",
    )


@router.get("/search")
def search(query: str | None = Query(default=None)) -> Any:
    """Search movies by title (adult titles excluded)."""
    if not query or not query.strip():
        return error_response(400, "Search query is required")
    return _forward(
        lambda: search_movies(query),
        context=f"search results for {query!r}",
        failure_message="Failed to search movies",
    )


@router.get("/category/{category}")
def movies_by_category(category: str) -> Any:
    """popular / top_rated / upcoming / now_playing; anything else falls back to popular."""
    return _forward(
        lambda: fetch_movies_by_category(category),
        context=f"{category} movies",
        failure_message="Failed to fetch movies by category",
    )


@router.get("/{movie_id}")
def movie_details(movie_id: int) -> Any:
    """Movie details with credits, videos and similar movies appended."""
    return _forward(
        lambda: fetch_movie_details(movie_id),
        context=f"movie details for {movie_id}",
        failure_message="Failed to fetch movie details",
    )
