from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from movie_explorer.db.documents import StoredDocument

MIN_RATING = 1
MAX_RATING = 5
ANONYMOUS_USER_NAME = "Anonymous User"


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if raw.isdigit():
            return int(raw)
    return None


def validate_rating(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Rating must be an integer, got {value!r}.")
    if not MIN_RATING <= value <= MAX_RATING:
        raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {value}.")
    return value


@dataclass(frozen=True)
class ReviewDraft:
    """
    Caller-supplied review fields (maps to a `reviews` document minus the
    store-assigned `id`, `createdAt` and `updatedAt`).
    """

    movie_id: int
    user_id: str
    rating: int
    comment: str = ""
    movie_title: str | None = None
    poster_path: str | None = None
    user_name: str = ANONYMOUS_USER_NAME
    user_photo_url: str | None = None

    def __post_init__(self) -> None:
        validate_rating(self.rating)
        if not str(self.user_id or "").strip():
            raise ValueError("Review requires a user id.")

    def to_document(self) -> dict[str, Any]:
        return {
            "movieId": int(self.movie_id),
            "movieTitle": self.movie_title,
            "posterPath": self.poster_path,
            "userId": self.user_id,
            "userName": self.user_name or ANONYMOUS_USER_NAME,
            "userPhotoURL": self.user_photo_url,
            "rating": self.rating,
            "comment": self.comment,
        }


@dataclass(frozen=True)
class Review:
    id: str
    movie_id: int | None
    user_id: str | None
    rating: int | None
    comment: str = ""
    movie_title: str | None = None
    poster_path: str | None = None
    user_name: str | None = None
    user_photo_url: str | None = None
    created_at: Any = None
    updated_at: Any = None

    @classmethod
    def from_document(cls, doc: StoredDocument) -> Review:
        data: Mapping[str, Any] = doc.data
        return cls(
            id=doc.id,
            movie_id=_coerce_int(data.get("movieId")),
            user_id=data.get("userId"),
            rating=data.get("rating"),
            comment=data.get("comment") or "",
            movie_title=data.get("movieTitle"),
            poster_path=data.get("posterPath"),
            user_name=data.get("userName"),
            user_photo_url=data.get("userPhotoURL"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )
