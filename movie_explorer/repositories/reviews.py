from __future__ import annotations

import logging
from typing import Any, Mapping

from movie_explorer.db.documents import (
    REVIEWS_COLLECTION,
    SERVER_TIMESTAMP,
    DocumentStore,
    DocumentStoreError,
)
from movie_explorer.db.queries import query_newest_first
from movie_explorer.models.reviews import Review, ReviewDraft

logger = logging.getLogger(__name__)


class ReviewRepositoryError(RuntimeError):
    pass


class ReviewRepository:
    """
    Review lifecycle against the `reviews` collection.

    One review per (user, movie) is an application-level rule: callers check
    `get_user_review_for_movie()` before `create_review()`. There is no
    transaction around the two steps, so concurrent sessions can still race.

    Listing is best effort and never raises; lookups and writes raise
    `ReviewRepositoryError`.
    """

    def __init__(self, store: DocumentStore, *, collection: str = REVIEWS_COLLECTION) -> None:
        self._store = store
        self._collection = collection

    # --- Reads ---

    def list_reviews_for_movie(self, movie_id: int) -> list[Review]:
        """Reviews for a movie, newest first. Returns [] on any failure."""
        try:
            filters = {"movieId": int(movie_id)}
        except (TypeError, ValueError) as exc:
            logger.error(f"Error getting reviews for movie {movie_id!r}: {exc}")
            return []
        return self._list_newest_first(filters, context=f"movie {movie_id}")

    def list_reviews_for_user(self, user_id: str) -> list[Review]:
        """Reviews written by a user, newest first. Returns [] on any failure."""
        return self._list_newest_first({"userId": user_id}, context=f"user {user_id}")

    def _list_newest_first(self, filters: Mapping[str, Any], *, context: str) -> list[Review]:
        try:
            documents = query_newest_first(self._store, self._collection, filters)
        except Exception as exc:
            logger.error(f"Error getting reviews for {context}: {exc}")
            return []
        return [Review.from_document(doc) for doc in documents]

    def get_user_review_for_movie(self, user_id: str, movie_id: int) -> Review | None:
        try:
            documents = self._store.query(self._collection, {"userId": user_id, "movieId": int(movie_id)})
        except DocumentStoreError as exc:
            logger.error(f"Error getting review by user {user_id} for movie {movie_id}: {exc}")
            raise ReviewRepositoryError("Failed to get user review") from exc
        if not documents:
            return None
        return Review.from_document(documents[0])

    # --- Writes ---

    def create_review(self, draft: ReviewDraft) -> str:
        payload = draft.to_document()
        payload["createdAt"] = SERVER_TIMESTAMP
        try:
            review_id = self._store.add(self._collection, payload)
        except DocumentStoreError as exc:
            logger.error(f"Error adding review for movie {draft.movie_id}: {exc}")
            raise ReviewRepositoryError("Failed to add review") from exc
        logger.info(f"Created review {review_id} for movie {draft.movie_id} by user {draft.user_id}")
        return review_id

    def update_review(self, review_id: str, changes: ReviewDraft | Mapping[str, Any]) -> None:
        """
        Overwrite the given fields and stamp `updatedAt` with server time.

        `createdAt` is never written here, even if present in `changes`.
        """

        payload = changes.to_document() if isinstance(changes, ReviewDraft) else dict(changes)
        payload.pop("id", None)
        payload.pop("createdAt", None)
        payload["updatedAt"] = SERVER_TIMESTAMP
        try:
            self._store.update(self._collection, review_id, payload)
        except DocumentStoreError as exc:
            logger.error(f"Error updating review {review_id}: {exc}")
            raise ReviewRepositoryError("Failed to update review") from exc

    def delete_review(self, review_id: str) -> None:
        try:
            self._store.delete(self._collection, review_id)
        except DocumentStoreError as exc:
            logger.error(f"Error deleting review {review_id}: {exc}")
            raise ReviewRepositoryError("Failed to delete review") from exc
