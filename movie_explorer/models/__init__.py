"""
Domain models shared across the API and scripts.
"""

from movie_explorer.models.reviews import Review, ReviewDraft
from movie_explorer.models.watchlist import MovieSummary, WatchlistEntry

__all__ = [
    "MovieSummary",
    "Review",
    "ReviewDraft",
    "WatchlistEntry",
]
