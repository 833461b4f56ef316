"""
Watchlist endpoints for the signed-in user.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Response

from api.auth import CurrentUser
from api.deps import Watchlist, error_response
from api.schemas import CreatedResponse, MovieIn, WatchlistEntryOut
from movie_explorer.models import MovieSummary
from movie_explorer.repositories import DuplicateWatchlistEntryError, WatchlistRepositoryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/watchlist", tags=["watchlist"])


@router.get("", response_model=list[WatchlistEntryOut])
def get_watchlist(watchlist: Watchlist, user: CurrentUser) -> Any:
    """The user's watchlist. A load failure is a hard error (500)."""
    try:
        entries = watchlist.get_watchlist(user.uid)
    except WatchlistRepositoryError as exc:
        return error_response(500, str(exc))
    return [WatchlistEntryOut.from_entry(entry) for entry in entries]


@router.get("/{movie_id}", response_model=WatchlistEntryOut | None)
def get_watchlist_entry(watchlist: Watchlist, user: CurrentUser, movie_id: int) -> WatchlistEntryOut | None:
    """The entry for a movie, or null when it is not on the watchlist (or the lookup failed)."""
    entry = watchlist.is_in_watchlist(user.uid, movie_id)
    return WatchlistEntryOut.from_entry(entry) if entry else None


@router.post("", status_code=201, response_model=CreatedResponse)
def add_to_watchlist(watchlist: Watchlist, user: CurrentUser, movie: MovieIn) -> Any:
    summary = MovieSummary(
        id=movie.id,
        title=movie.title,
        poster_path=movie.poster_path,
        release_date=movie.release_date,
        overview=movie.overview,
        vote_average=movie.vote_average,
    )
    try:
        entry_id = watchlist.add_to_watchlist(user.uid, summary)
    except DuplicateWatchlistEntryError as exc:
        return error_response(409, str(exc))
    except WatchlistRepositoryError as exc:
        return error_response(500, str(exc))
    return CreatedResponse(id=entry_id)


@router.delete("/{entry_id}", status_code=204)
def remove_from_watchlist(watchlist: Watchlist, user: CurrentUser, entry_id: str) -> Response:
    try:
        watchlist.remove_from_watchlist(entry_id)
    except WatchlistRepositoryError as exc:
        return error_response(500, str(exc))
    logger.info(f"User {user.uid} removed watchlist entry {entry_id}")
    return Response(status_code=204)
