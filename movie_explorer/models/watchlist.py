from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from movie_explorer.db.documents import StoredDocument


@dataclass(frozen=True)
class MovieSummary:
    """The subset of a TMDb movie object copied into a watchlist entry."""

    id: int
    title: str | None = None
    poster_path: str | None = None
    release_date: str | None = None
    overview: str | None = None
    vote_average: float | None = None

    @classmethod
    def from_tmdb(cls, movie: Mapping[str, Any]) -> MovieSummary:
        movie_id = movie.get("id")
        if isinstance(movie_id, bool) or not isinstance(movie_id, int):
            raise ValueError(f"TMDb movie payload has no integer id: {movie_id!r}")
        vote_average = movie.get("vote_average")
        return cls(
            id=movie_id,
            title=movie.get("title"),
            poster_path=movie.get("poster_path"),
            release_date=movie.get("release_date"),
            overview=movie.get("overview"),
            vote_average=float(vote_average) if isinstance(vote_average, (int, float)) else None,
        )


@dataclass(frozen=True)
class WatchlistEntry:
    id: str
    user_id: str | None
    movie_id: int | None
    title: str | None = None
    poster_path: str | None = None
    release_date: str | None = None
    overview: str | None = None
    vote_average: float | None = None
    added_at: Any = None

    @classmethod
    def from_document(cls, doc: StoredDocument) -> WatchlistEntry:
        data: Mapping[str, Any] = doc.data
        return cls(
            id=doc.id,
            user_id=data.get("userId"),
            movie_id=data.get("movieId"),
            title=data.get("title"),
            poster_path=data.get("posterPath"),
            release_date=data.get("releaseDate"),
            overview=data.get("overview"),
            vote_average=data.get("voteAverage"),
            added_at=data.get("addedAt"),
        )
