"""
Document store abstraction for user-generated data (reviews, watchlist).

Repositories depend on the abstract `DocumentStore` interface so the backing
service (Cloud Firestore in production, an in-process store in local dev and
tests) is chosen once at startup and passed in explicitly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

REVIEWS_COLLECTION = "reviews"
WATCHLIST_COLLECTION = "watchlist"


class _ServerTimestamp:
    """Placeholder resolved to the store's own clock when a write is applied."""

    _instance: _ServerTimestamp | None = None

    def __new__(cls) -> _ServerTimestamp:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class DocumentStoreError(RuntimeError):
    """Raised when a document store read or write fails."""

    pass


class IndexNotReadyError(DocumentStoreError):
    """
    Raised when a filtered + ordered query needs a composite index that does
    not exist yet or is still building.
    """

    def __init__(self, message: str, *, collection: str | None = None, fields: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.collection = collection
        self.fields = fields


@dataclass(frozen=True)
class StoredDocument:
    id: str
    data: Mapping[str, Any] = field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        """Flatten into a single dict with the store id under `id`."""
        return {"id": self.id, **dict(self.data)}


class DocumentStore(ABC):
    """Abstract document store interface."""

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Mapping[str, Any],
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[StoredDocument]:
        """
        Return documents whose fields equal every value in `filters`.

        When `order_by` is given the store sorts server-side, which may require
        a composite index; raises `IndexNotReadyError` when it is unavailable.
        """
        pass

    @abstractmethod
    def stream(self, collection: str) -> Iterator[StoredDocument]:
        """Iterate every document in a collection (unfiltered scan)."""
        pass

    @abstractmethod
    def add(self, collection: str, data: Mapping[str, Any]) -> str:
        """Insert a document and return its store-assigned id."""
        pass

    @abstractmethod
    def update(self, collection: str, document_id: str, patch: Mapping[str, Any]) -> None:
        """Merge `patch` into an existing document."""
        pass

    @abstractmethod
    def delete(self, collection: str, document_id: str) -> None:
        """Delete a document by id."""
        pass
