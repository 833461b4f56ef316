"""
Review endpoints: per-movie listing, the signed-in user's reviews, and
create / update / delete.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Response

from api.auth import CurrentUser
from api.deps import MovieDetailsLookup, Reviews, Store, error_response
from api.schemas import CreatedResponse, ReviewIn, ReviewOut
from movie_explorer.ingestion.poster_backfill import backfill_review_poster_paths
from movie_explorer.models import ReviewDraft
from movie_explorer.models.reviews import ANONYMOUS_USER_NAME
from movie_explorer.repositories import ReviewRepositoryError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews"])


@router.get("/movies/{movie_id}/reviews", response_model=list[ReviewOut])
def list_movie_reviews(reviews: Reviews, movie_id: int) -> list[ReviewOut]:
    """All reviews for a movie, newest first. Never fails; errors yield []."""
    return [ReviewOut.from_review(review) for review in reviews.list_reviews_for_movie(movie_id)]


@router.get("/movies/{movie_id}/reviews/mine", response_model=ReviewOut | None)
def get_my_review(reviews: Reviews, user: CurrentUser, movie_id: int) -> Any:
    """The signed-in user's review of a movie, or null."""
    try:
        review = reviews.get_user_review_for_movie(user.uid, movie_id)
    except ReviewRepositoryError as exc:
        return error_response(500, str(exc))
    return ReviewOut.from_review(review) if review else None


@router.post("/movies/{movie_id}/reviews", status_code=201, response_model=CreatedResponse)
def create_review(reviews: Reviews, user: CurrentUser, movie_id: int, body: ReviewIn) -> Any:
    """
    Submit a review. One review per user and movie: a second submission is
    rejected with 409 and should be sent as an update instead.
    """
    try:
        existing = reviews.get_user_review_for_movie(user.uid, movie_id)
    except ReviewRepositoryError as exc:
        return error_response(500, str(exc))
    if existing is not None:
        return error_response(409, "You have already reviewed this movie")

    draft = ReviewDraft(
        movie_id=movie_id,
        user_id=user.uid,
        rating=body.rating,
        comment=body.comment.strip(),
        movie_title=body.movie_title,
        poster_path=body.poster_path,
        user_name=user.display_name or ANONYMOUS_USER_NAME,
        user_photo_url=user.photo_url,
    )
    try:
        review_id = reviews.create_review(draft)
    except ReviewRepositoryError as exc:
        return error_response(500, str(exc))
    return CreatedResponse(id=review_id)


@router.put("/reviews/{review_id}", response_model=CreatedResponse)
def update_review(reviews: Reviews, user: CurrentUser, review_id: str, body: ReviewIn) -> Any:
    """
    Replace rating and comment (and optionally the movie display fields) of an
    existing review. The author fields written at creation are left untouched.
    """
    changes: dict[str, Any] = {
        "rating": body.rating,
        "comment": body.comment.strip(),
    }
    if body.movie_title is not None:
        changes["movieTitle"] = body.movie_title
    if body.poster_path is not None:
        changes["posterPath"] = body.poster_path

    try:
        reviews.update_review(review_id, changes)
    except ReviewRepositoryError as exc:
        return error_response(500, str(exc))
    logger.info(f"User {user.uid} updated review {review_id}")
    return CreatedResponse(id=review_id)


@router.delete("/reviews/{review_id}", status_code=204)
def delete_review(reviews: Reviews, user: CurrentUser, review_id: str) -> Response:
    try:
        reviews.delete_review(review_id)
    except ReviewRepositoryError as exc:
        return error_response(500, str(exc))
    logger.info(f"User {user.uid} deleted review {review_id}")
    return Response(status_code=204)


@router.get("/users/me/reviews", response_model=list[ReviewOut])
def list_my_reviews(
    reviews: Reviews,
    store: Store,
    fetch_details: MovieDetailsLookup,
    user: CurrentUser,
) -> list[ReviewOut]:
    """
    The signed-in user's reviews, newest first.

    Missing poster paths are backfilled first so the list renders with images.
    """
    try:
        summary = backfill_review_poster_paths(store, fetch_details=fetch_details)
    except Exception as exc:  # noqa: BLE001
        logger.error(f"Poster backfill failed before listing reviews for {user.uid}: {exc}")
    else:
        if summary.updated:
            logger.info(f"Backfilled {summary.updated} poster paths before listing reviews for {user.uid}")
    return [ReviewOut.from_review(review) for review in reviews.list_reviews_for_user(user.uid)]
