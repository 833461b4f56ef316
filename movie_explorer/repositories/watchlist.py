from __future__ import annotations

import logging
from typing import Any, Mapping

from movie_explorer.db.documents import (
    SERVER_TIMESTAMP,
    WATCHLIST_COLLECTION,
    DocumentStore,
    DocumentStoreError,
)
from movie_explorer.models.watchlist import MovieSummary, WatchlistEntry

logger = logging.getLogger(__name__)


class WatchlistRepositoryError(RuntimeError):
    pass


class DuplicateWatchlistEntryError(WatchlistRepositoryError):
    def __init__(self, user_id: str, movie_id: int) -> None:
        super().__init__("Movie already in watchlist")
        self.user_id = user_id
        self.movie_id = movie_id


class WatchlistRepository:
    """
    Watchlist entries in the `watchlist` collection, one per (user, movie).

    `get_watchlist()` failures are fatal to the caller; `is_in_watchlist()` is
    lenient and reports "not in watchlist" when the store errors.
    """

    def __init__(self, store: DocumentStore, *, collection: str = WATCHLIST_COLLECTION) -> None:
        self._store = store
        self._collection = collection

    def get_watchlist(self, user_id: str) -> list[WatchlistEntry]:
        try:
            documents = self._store.query(self._collection, {"userId": user_id})
        except DocumentStoreError as exc:
            logger.error(f"Error getting watchlist for user {user_id}: {exc}")
            raise WatchlistRepositoryError("Failed to get watchlist") from exc
        return [WatchlistEntry.from_document(doc) for doc in documents]

    def _find_entry(self, user_id: str, movie_id: int) -> WatchlistEntry | None:
        documents = self._store.query(self._collection, {"userId": user_id, "movieId": int(movie_id)})
        if not documents:
            return None
        return WatchlistEntry.from_document(documents[0])

    def is_in_watchlist(self, user_id: str, movie_id: int) -> WatchlistEntry | None:
        try:
            return self._find_entry(user_id, movie_id)
        except DocumentStoreError as exc:
            logger.error(f"Error checking watchlist for user {user_id}, movie {movie_id}: {exc}")
            return None

    def add_to_watchlist(self, user_id: str, movie: MovieSummary | Mapping[str, Any]) -> str:
        summary = movie if isinstance(movie, MovieSummary) else MovieSummary.from_tmdb(movie)

        try:
            existing = self._find_entry(user_id, summary.id)
        except DocumentStoreError as exc:
            logger.error(f"Error checking watchlist before insert for user {user_id}: {exc}")
            raise WatchlistRepositoryError("Failed to add to watchlist") from exc
        if existing is not None:
            raise DuplicateWatchlistEntryError(user_id, summary.id)

        payload: dict[str, Any] = {
            "userId": user_id,
            "movieId": summary.id,
            "title": summary.title,
            "posterPath": summary.poster_path,
            "releaseDate": summary.release_date,
            "overview": summary.overview,
            "voteAverage": summary.vote_average,
            "addedAt": SERVER_TIMESTAMP,
        }
        try:
            entry_id = self._store.add(self._collection, payload)
        except DocumentStoreError as exc:
            logger.error(f"Error adding movie {summary.id} to watchlist for user {user_id}: {exc}")
            raise WatchlistRepositoryError("Failed to add to watchlist") from exc
        return entry_id

    def remove_from_watchlist(self, entry_id: str) -> None:
        try:
            self._store.delete(self._collection, entry_id)
        except DocumentStoreError as exc:
            logger.error(f"Error removing watchlist entry {entry_id}: {exc}")
            raise WatchlistRepositoryError("Failed to remove from watchlist") from exc
