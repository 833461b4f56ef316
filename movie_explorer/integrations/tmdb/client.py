from __future__ import annotations

import os
from typing import Any, Mapping

import requests

TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

IMAGE_SIZES = ("w200", "w500", "original")
DEFAULT_IMAGE_SIZE = "w500"

MOVIE_CATEGORIES = ("popular", "top_rated", "upcoming", "now_playing")
DEFAULT_MOVIE_CATEGORY = "popular"

DETAILS_APPEND_TO_RESPONSE = ("credits", "videos", "similar")


class TmdbClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, body_snippet: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


def _require_api_key(api_key: str | None) -> str:
    resolved = (api_key or os.getenv("TMDB_API_KEY") or "").strip()
    if not resolved:
        raise RuntimeError("TMDB_API_KEY is not set.")
    return resolved


def resolve_api_key(api_key: str | None = None) -> str | None:
    """
    Best-effort API key resolution for callers that want to continue when the key is missing.
    """

    resolved = (api_key or os.getenv("TMDB_API_KEY") or "").strip()
    return resolved or None


def _request_json(
    session: requests.Session,
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    timeout_seconds: float = 20.0,
) -> dict[str, Any]:
    """
    Single GET against TMDb. No retries and no caching: a failure is reported to
    the caller, who decides whether to try again.
    """

    headers = {"accept": "application/json"}
    try:
        resp = session.get(url, params=params, headers=headers, timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise TmdbClientError(f"TMDb request failed: {exc}") from exc

    if resp.status_code != 200:
        raise TmdbClientError(
            f"TMDb request failed with HTTP {resp.status_code}.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        )

    try:
        payload = resp.json()
    except ValueError as exc:
        raise TmdbClientError(
            "TMDb returned non-JSON response.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        ) from exc

    if not isinstance(payload, dict):
        raise TmdbClientError("TMDb returned unexpected JSON shape (not an object).")
    return payload


def normalize_movie_category(category: str | None) -> str:
    """Map a category name to a TMDb movie list; unknown names fall back to `popular`."""

    value = str(category or "").strip().casefold()
    return value if value in MOVIE_CATEGORIES else DEFAULT_MOVIE_CATEGORY


def build_image_url(path: str | None, size: str = DEFAULT_IMAGE_SIZE) -> str | None:
    """
    Build a TMDb CDN image URL, e.g. `https://image.tmdb.org/t/p/w500/abc.jpg`.

    Returns None when there is no stored path.
    """

    if not isinstance(path, str) or not path.strip():
        return None
    return f"{TMDB_IMAGE_BASE_URL}/{size or DEFAULT_IMAGE_SIZE}{path.strip()}"


def fetch_trending_movies(
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """Weekly trending movies (`/trending/movie/week`)."""

    api_key = _require_api_key(api_key)
    session = session or requests.Session()
    url = f"{TMDB_API_BASE_URL}/trending/movie/week"
    return _request_json(session, url, params={"api_key": api_key})


def search_movies(
    query: str,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """Title search with adult content excluded."""

    text = str(query or "").strip()
    if not text:
        raise ValueError("Search query is required.")

    api_key = _require_api_key(api_key)
    session = session or requests.Session()
    url = f"{TMDB_API_BASE_URL}/search/movie"
    return _request_json(
        session,
        url,
        params={"api_key": api_key, "query": text, "include_adult": "false"},
    )


def fetch_movie_details(
    movie_id: int,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    append_to_response: list[str] | tuple[str, ...] | None = DETAILS_APPEND_TO_RESPONSE,
) -> dict[str, Any]:
    """
    Fetch a single movie. By default credits, videos and similar movies are
    appended to the payload.
    """

    api_key = _require_api_key(api_key)
    session = session or requests.Session()
    url = f"{TMDB_API_BASE_URL}/movie/{int(movie_id)}"
    params: dict[str, Any] = {"api_key": api_key}
    if append_to_response:
        params["append_to_response"] = ",".join(append_to_response)
    return _request_json(session, url, params=params)


def fetch_movies_by_category(
    category: str,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    api_key = _require_api_key(api_key)
    session = session or requests.Session()
    url = f"{TMDB_API_BASE_URL}/movie/{normalize_movie_category(category)}"
    return _request_json(session, url, params={"api_key": api_key})
