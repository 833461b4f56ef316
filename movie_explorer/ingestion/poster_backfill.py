"""
Backfill `posterPath` on review documents that were saved without one.

The scan reads the whole `reviews` collection: Firestore cannot filter on a
missing field, so there is no narrower server-side query. Cost is
O(total reviews) per pass, with no batching or pagination.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

import requests

from movie_explorer.db.documents import REVIEWS_COLLECTION, DocumentStore, DocumentStoreError, StoredDocument
from movie_explorer.integrations.tmdb.client import fetch_movie_details

logger = logging.getLogger(__name__)

MovieDetailsFetcher = Callable[[int], Mapping[str, Any]]

DEFAULT_CONCURRENCY = 8


@dataclass(frozen=True)
class BackfillFailure:
    review_id: str
    movie_id: int | None
    message: str


@dataclass(frozen=True)
class PosterBackfillSummary:
    scanned: int = 0
    candidates: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    failures: list[BackfillFailure] = field(default_factory=list)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _as_movie_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def needs_poster_backfill(review: Mapping[str, Any]) -> bool:
    if not isinstance(review, Mapping):
        return False
    return _as_movie_id(review.get("movieId")) is not None and _is_missing(review.get("posterPath"))


def _default_fetcher(api_key: str | None) -> MovieDetailsFetcher:
    session = requests.Session()

    def fetch(movie_id: int) -> Mapping[str, Any]:
        return fetch_movie_details(movie_id, api_key=api_key, session=session, append_to_response=None)

    return fetch


def backfill_review_poster_paths(
    store: DocumentStore,
    *,
    fetch_details: MovieDetailsFetcher | None = None,
    api_key: str | None = None,
    concurrency: int = DEFAULT_CONCURRENCY,
    dry_run: bool = False,
    collection: str = REVIEWS_COLLECTION,
) -> PosterBackfillSummary:
    """
    Fill in missing poster paths from TMDb movie details.

    Each candidate review is looked up and patched independently; a failed
    lookup or write is logged and skipped without stopping the others. A failure
    while scanning the collection returns an all-zero summary.
    """

    try:
        documents: list[StoredDocument] = list(store.stream(collection))
    except DocumentStoreError as exc:
        logger.error(f"Error scanning {collection} for poster backfill: {exc}")
        return PosterBackfillSummary()

    candidates = [doc for doc in documents if needs_poster_backfill(doc.data)]
    if not candidates:
        logger.info(f"Poster backfill: scanned {len(documents)} reviews, nothing to update")
        return PosterBackfillSummary(scanned=len(documents))

    fetch = fetch_details or _default_fetcher(api_key)

    def run_one(doc: StoredDocument) -> tuple[str, str | None]:
        movie_id = _as_movie_id(doc.data.get("movieId"))
        try:
            details = fetch(movie_id)
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"Could not fetch movie details for ID: {movie_id}: {exc}")
            return "failed", str(exc)

        poster_path = details.get("poster_path") if isinstance(details, Mapping) else None
        if _is_missing(poster_path):
            return "skipped", None
        if dry_run:
            logger.info(f"[dry-run] would set posterPath={poster_path} on review {doc.id}")
            return "updated", None

        try:
            store.update(collection, doc.id, {"posterPath": poster_path})
        except DocumentStoreError as exc:
            logger.warning(f"Could not update posterPath on review {doc.id}: {exc}")
            return "failed", str(exc)
        return "updated", None

    updated = 0
    skipped = 0
    failures: list[BackfillFailure] = []

    with ThreadPoolExecutor(max_workers=max(1, int(concurrency))) as pool:
        futures = {pool.submit(run_one, doc): doc for doc in candidates}
        for fut in as_completed(futures):
            doc = futures[fut]
            try:
                status, error = fut.result()
            except Exception as exc:  # noqa: BLE001
                logger.warning(f"Poster backfill failed for review {doc.id}: {exc}")
                status, error = "failed", str(exc)
            if status == "updated":
                updated += 1
            elif status == "skipped":
                skipped += 1
            else:
                failures.append(
                    BackfillFailure(
                        review_id=doc.id,
                        movie_id=_as_movie_id(doc.data.get("movieId")),
                        message=error or "unknown error",
                    )
                )

    logger.info(f"Updated {updated} reviews with missing poster paths")
    return PosterBackfillSummary(
        scanned=len(documents),
        candidates=len(candidates),
        updated=updated,
        skipped=skipped,
        failed=len(failures),
        failures=failures,
    )
