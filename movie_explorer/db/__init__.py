"""
Document store helpers for Movie Explorer services and scripts.
"""

from __future__ import annotations

import logging
import os

from movie_explorer.db.documents import (
    REVIEWS_COLLECTION,
    SERVER_TIMESTAMP,
    WATCHLIST_COLLECTION,
    DocumentStore,
    DocumentStoreError,
    IndexNotReadyError,
    StoredDocument,
)

logger = logging.getLogger(__name__)

__all__ = [
    "REVIEWS_COLLECTION",
    "SERVER_TIMESTAMP",
    "WATCHLIST_COLLECTION",
    "DocumentStore",
    "DocumentStoreError",
    "IndexNotReadyError",
    "StoredDocument",
    "create_document_store",
]


def create_document_store(backend: str | None = None) -> DocumentStore:
    """
    Build the configured document store.

    Uses Firestore unless DOCUMENT_STORE_BACKEND=memory, which keeps everything
    in-process (fine for local dev, not multi-instance).
    """

    resolved = (backend or os.getenv("DOCUMENT_STORE_BACKEND") or "firestore").strip().casefold()
    if resolved == "memory":
        from movie_explorer.db.memory import InMemoryDocumentStore

        return InMemoryDocumentStore()
    if resolved == "firestore":
        from movie_explorer.db.firestore import FirestoreDocumentStore

        logger.info("Using Firestore document store")
        return FirestoreDocumentStore()
    raise RuntimeError(f"Unknown DOCUMENT_STORE_BACKEND: {resolved!r} (expected 'firestore' or 'memory')")
