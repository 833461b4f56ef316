"""
Maintenance passes that repair denormalized data in the document store.
"""

from movie_explorer.ingestion.poster_backfill import (
    PosterBackfillSummary,
    backfill_review_poster_paths,
    needs_poster_backfill,
)

__all__ = [
    "PosterBackfillSummary",
    "backfill_review_poster_paths",
    "needs_poster_backfill",
]
