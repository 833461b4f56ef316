"""
Repository layer for document store access patterns.
"""

from movie_explorer.repositories.reviews import ReviewRepository, ReviewRepositoryError
from movie_explorer.repositories.watchlist import (
    DuplicateWatchlistEntryError,
    WatchlistRepository,
    WatchlistRepositoryError,
)

__all__ = [
    "DuplicateWatchlistEntryError",
    "ReviewRepository",
    "ReviewRepositoryError",
    "WatchlistRepository",
    "WatchlistRepositoryError",
]
