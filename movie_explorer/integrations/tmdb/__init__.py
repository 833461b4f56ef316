"""
TMDb integration clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from movie_explorer.integrations.tmdb.client import (
        TmdbClientError,
        build_image_url,
        fetch_movie_details,
        fetch_movies_by_category,
        fetch_trending_movies,
        normalize_movie_category,
        search_movies,
    )

__all__ = [
    "TmdbClientError",
    "build_image_url",
    "fetch_movie_details",
    "fetch_movies_by_category",
    "fetch_trending_movies",
    "normalize_movie_category",
    "search_movies",
]


def __getattr__(name: str):
    if name in __all__:
        from movie_explorer.integrations.tmdb import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
