"""
Two-tier "newest first" query strategy.

Composite indexes (e.g. `movieId` + `createdAt`) are not guaranteed to exist,
or to have finished building, when a query runs. The indexed path is tried
first; on `IndexNotReadyError` the filter-only query runs instead and the
results are sorted locally.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from movie_explorer.db.documents import DocumentStore, IndexNotReadyError, StoredDocument

logger = logging.getLogger(__name__)

CREATED_AT_FIELD = "createdAt"


def coerce_timestamp(value: Any) -> datetime | None:
    """
    Normalize stored timestamp values to an aware UTC datetime.

    Accepts datetimes (Firestore returns `DatetimeWithNanoseconds`), ISO-8601
    strings and epoch seconds. Anything else is treated as missing.
    """

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(float(value), tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return None


def sort_newest_first(documents: list[StoredDocument], *, field: str = CREATED_AT_FIELD) -> list[StoredDocument]:
    """
    Stable sort descending on `field`.

    Documents sharing a timestamp keep their fetch order. Documents without a
    usable timestamp go after every timestamped document, in fetch order.
    """

    dated: list[tuple[datetime, int, StoredDocument]] = []
    undated: list[StoredDocument] = []
    for position, doc in enumerate(documents):
        ts = coerce_timestamp(doc.data.get(field))
        if ts is None:
            undated.append(doc)
        else:
            dated.append((ts, position, doc))

    dated.sort(key=lambda item: (-item[0].timestamp(), item[1]))
    return [doc for _ts, _pos, doc in dated] + undated


def query_newest_first(
    store: DocumentStore,
    collection: str,
    filters: Mapping[str, Any],
    *,
    field: str = CREATED_AT_FIELD,
) -> list[StoredDocument]:
    """
    Run an indexed `filters` + `field desc` query, degrading to filter-only plus
    a local sort when the composite index is unavailable.

    Only `IndexNotReadyError` triggers the fallback; other store errors propagate.
    """

    try:
        return store.query(collection, filters, order_by=field, descending=True)
    except IndexNotReadyError as exc:
        logger.warning(f"{collection} index not ready yet, falling back to basic query: {exc}")

    documents = store.query(collection, filters)
    return sort_newest_first(documents, field=field)
