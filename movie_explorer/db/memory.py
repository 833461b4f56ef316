"""
In-process document store for local development and tests.

Mirrors the Firestore behaviours the repositories care about:
- server timestamps are resolved by the store's clock at write time
- an ordered query raises `IndexNotReadyError` unless a matching composite
  index has been declared with `create_index()`

Not suitable for multi-instance deployments.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from collections import defaultdict
from collections.abc import Callable, Iterable, Iterator, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from movie_explorer.db.documents import (
    SERVER_TIMESTAMP,
    DocumentStore,
    DocumentStoreError,
    IndexNotReadyError,
    StoredDocument,
)

logger = logging.getLogger(__name__)


class _MonotonicClock:
    """Wall clock that never returns the same instant twice."""

    def __init__(self) -> None:
        self._last: datetime | None = None

    def __call__(self) -> datetime:
        now = datetime.now(UTC)
        if self._last is not None and now <= self._last:
            now = self._last + timedelta(microseconds=1)
        self._last = now
        return now


def _index_key(filters: Iterable[str], order_by: str) -> tuple[frozenset[str], str]:
    return frozenset(filters), order_by


class InMemoryDocumentStore(DocumentStore):
    def __init__(
        self,
        *,
        indexes: Iterable[tuple[Iterable[str], str]] = (),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._indexes: set[tuple[frozenset[str], str]] = {_index_key(f, o) for f, o in indexes}
        self._clock = clock or _MonotonicClock()
        self._lock = threading.Lock()
        logger.info("InMemoryDocumentStore created (local dev mode)")

    # --- Index simulation ---

    def create_index(self, filters: Iterable[str], order_by: str) -> None:
        """Declare a composite index as built (filter fields + ordered field)."""
        self._indexes.add(_index_key(filters, order_by))

    def drop_index(self, filters: Iterable[str], order_by: str) -> None:
        self._indexes.discard(_index_key(filters, order_by))

    def _has_index(self, filters: Iterable[str], order_by: str) -> bool:
        fields = frozenset(filters)
        if not fields:
            # single-field ordering is covered by automatic indexes
            return True
        return _index_key(fields, order_by) in self._indexes

    # --- DocumentStore ---

    def query(
        self,
        collection: str,
        filters: Mapping[str, Any],
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[StoredDocument]:
        if order_by and not self._has_index(filters.keys(), order_by):
            raise IndexNotReadyError(
                f"The query requires an index on {collection} ({', '.join(sorted(filters))}, {order_by}).",
                collection=collection,
                fields=(*sorted(filters), order_by),
            )

        with self._lock:
            rows = [
                (doc_id, copy.deepcopy(data))
                for doc_id, data in self._collections[collection].items()
                if all(k in data and data[k] == v for k, v in filters.items())
            ]

        if order_by:
            # Firestore omits documents that lack the ordered field.
            rows = [row for row in rows if row[1].get(order_by) is not None]
            rows.sort(key=lambda row: row[1][order_by], reverse=descending)

        return [StoredDocument(id=doc_id, data=data) for doc_id, data in rows]

    def stream(self, collection: str) -> Iterator[StoredDocument]:
        with self._lock:
            snapshot = [(doc_id, copy.deepcopy(data)) for doc_id, data in self._collections[collection].items()]
        for doc_id, data in snapshot:
            yield StoredDocument(id=doc_id, data=data)

    def add(self, collection: str, data: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        with self._lock:
            self._collections[collection][doc_id] = self._resolve(data)
        return doc_id

    def update(self, collection: str, document_id: str, patch: Mapping[str, Any]) -> None:
        with self._lock:
            existing = self._collections[collection].get(document_id)
            if existing is None:
                raise DocumentStoreError(f"No document to update: {collection}/{document_id}")
            existing.update(self._resolve(patch))

    def delete(self, collection: str, document_id: str) -> None:
        with self._lock:
            self._collections[collection].pop(document_id, None)

    # --- Helpers ---

    def get(self, collection: str, document_id: str) -> StoredDocument | None:
        with self._lock:
            data = self._collections[collection].get(document_id)
            if data is None:
                return None
            return StoredDocument(id=document_id, data=copy.deepcopy(data))

    def put(self, collection: str, document_id: str, data: Mapping[str, Any]) -> None:
        """Insert a document verbatim under a fixed id (fixtures and seeding)."""
        with self._lock:
            self._collections[collection][document_id] = self._resolve(data)

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections[collection])

    def _resolve(self, data: Mapping[str, Any]) -> dict[str, Any]:
        resolved: dict[str, Any] = {}
        for key, value in data.items():
            resolved[key] = self._clock() if value is SERVER_TIMESTAMP else copy.deepcopy(value)
        return resolved
