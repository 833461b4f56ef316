"""
Pydantic request/response models shared by the review and watchlist routers.

JSON uses the same camelCase field names as the stored documents.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from movie_explorer.db.queries import coerce_timestamp
from movie_explorer.integrations.tmdb.client import build_image_url
from movie_explorer.models import Review, WatchlistEntry


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Reviews ---

class ReviewIn(CamelModel):
    rating: int = Field(ge=1, le=5)
    comment: str = ""
    movie_title: str | None = None
    poster_path: str | None = None


class ReviewOut(CamelModel):
    id: str
    movie_id: int | None
    movie_title: str | None = None
    poster_path: str | None = None
    poster_url: str | None = None
    user_id: str | None
    user_name: str | None = None
    user_photo_url: str | None = Field(default=None, alias="userPhotoURL")
    rating: int | None
    comment: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_review(cls, review: Review) -> ReviewOut:
        return cls(
            id=review.id,
            movie_id=review.movie_id,
            movie_title=review.movie_title,
            poster_path=review.poster_path,
            poster_url=build_image_url(review.poster_path),
            user_id=review.user_id,
            user_name=review.user_name,
            user_photo_url=review.user_photo_url,
            rating=review.rating,
            comment=review.comment,
            created_at=coerce_timestamp(review.created_at),
            updated_at=coerce_timestamp(review.updated_at),
        )


# --- Watchlist ---

class MovieIn(BaseModel):
    """TMDb movie object as returned by the metadata endpoints (snake_case)."""

    id: int
    title: str | None = None
    poster_path: str | None = None
    release_date: str | None = None
    overview: str | None = None
    vote_average: float | None = None


class WatchlistEntryOut(CamelModel):
    id: str
    user_id: str | None
    movie_id: int | None
    title: str | None = None
    poster_path: str | None = None
    poster_url: str | None = None
    release_date: str | None = None
    overview: str | None = None
    vote_average: float | None = None
    added_at: datetime | None = None

    @classmethod
    def from_entry(cls, entry: WatchlistEntry) -> WatchlistEntryOut:
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            movie_id=entry.movie_id,
            title=entry.title,
            poster_path=entry.poster_path,
            poster_url=build_image_url(entry.poster_path),
            release_date=entry.release_date,
            overview=entry.overview,
            vote_average=entry.vote_average,
            added_at=coerce_timestamp(entry.added_at),
        )


class CreatedResponse(BaseModel):
    id: str
