"""
Cloud Firestore implementation of the document store.

Queries use equality filters only. Ordered queries on a filtered field need a
composite index; Firestore rejects them with FAILED_PRECONDITION ("The query
requires an index") until the index exists and has finished building, which
is surfaced as `IndexNotReadyError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from firebase_admin import firestore
from google.api_core import exceptions as gcp_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from movie_explorer import get_firebase_app
from movie_explorer.db.documents import (
    SERVER_TIMESTAMP,
    DocumentStore,
    DocumentStoreError,
    IndexNotReadyError,
    StoredDocument,
)

logger = logging.getLogger(__name__)


def is_index_not_ready_error(error: Exception) -> bool:
    """
    Check if an exception is Firestore's missing/building composite index error.

    Args:
        error: The exception to check.

    Returns:
        True if the query failed only because its index is not available.
    """
    message = str(error).casefold()
    if isinstance(error, gcp_exceptions.FailedPrecondition):
        return "index" in message
    return "requires an index" in message or "index is currently building" in message


def _to_firestore_value(value: Any) -> Any:
    if value is SERVER_TIMESTAMP:
        return firestore.SERVER_TIMESTAMP
    return value


def _to_firestore_payload(data: Mapping[str, Any]) -> dict[str, Any]:
    return {key: _to_firestore_value(value) for key, value in data.items()}


class FirestoreDocumentStore(DocumentStore):
    def __init__(self, client: Any | None = None) -> None:
        self._client = client if client is not None else firestore.client(app=get_firebase_app())

    def query(
        self,
        collection: str,
        filters: Mapping[str, Any],
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[StoredDocument]:
        query: Any = self._client.collection(collection)
        for field_path, value in filters.items():
            query = query.where(filter=FieldFilter(field_path, "==", value))
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)

        try:
            snapshots = list(query.stream())
        except Exception as exc:
            if order_by and is_index_not_ready_error(exc):
                raise IndexNotReadyError(
                    f"Firestore index not ready for {collection}: {exc}",
                    collection=collection,
                    fields=(*filters.keys(), order_by),
                ) from exc
            raise DocumentStoreError(f"Firestore error querying {collection}: {exc}") from exc

        return [StoredDocument(id=snap.id, data=snap.to_dict() or {}) for snap in snapshots]

    def stream(self, collection: str) -> Iterator[StoredDocument]:
        try:
            for snap in self._client.collection(collection).stream():
                yield StoredDocument(id=snap.id, data=snap.to_dict() or {})
        except Exception as exc:
            raise DocumentStoreError(f"Firestore error scanning {collection}: {exc}") from exc

    def add(self, collection: str, data: Mapping[str, Any]) -> str:
        try:
            _update_time, doc_ref = self._client.collection(collection).add(_to_firestore_payload(data))
        except Exception as exc:
            raise DocumentStoreError(f"Firestore error adding to {collection}: {exc}") from exc
        return doc_ref.id

    def update(self, collection: str, document_id: str, patch: Mapping[str, Any]) -> None:
        try:
            self._client.collection(collection).document(document_id).update(_to_firestore_payload(patch))
        except Exception as exc:
            raise DocumentStoreError(f"Firestore error updating {collection}/{document_id}: {exc}") from exc

    def delete(self, collection: str, document_id: str) -> None:
        try:
            self._client.collection(collection).document(document_id).delete()
        except Exception as exc:
            raise DocumentStoreError(f"Firestore error deleting {collection}/{document_id}: {exc}") from exc
