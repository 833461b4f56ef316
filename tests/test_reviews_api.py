"""
Smoke tests for the review endpoints.

The document store is in-memory and bearer tokens are checked by a fake
identity provider, so no Firebase project is needed.
"""
from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from api import auth, deps
from api.main import app
from movie_explorer.db import DocumentStoreError
from movie_explorer.db.memory import InMemoryDocumentStore
from movie_explorer.identity import IdentityError, IdentityProvider, UserIdentity

# --- Test data ---

MOCK_USER = UserIdentity(uid="user-1", display_name="Neo", photo_url="https://example.com/neo.png")
MOCK_OTHER_USER = UserIdentity(uid="user-2", display_name=None)

TOKENS = {"token-1": MOCK_USER, "token-2": MOCK_OTHER_USER}
AUTH = {"Authorization": "Bearer token-1"}
OTHER_AUTH = {"Authorization": "Bearer token-2"}


class FakeIdentityProvider(IdentityProvider):
    def verify_token(self, token: str) -> UserIdentity:
        try:
            return TOKENS[token]
        except KeyError:
            raise IdentityError("Invalid or expired ID token.") from None


class FailingQueryStore(InMemoryDocumentStore):
    def query(self, *args, **kwargs):
        raise DocumentStoreError("simulated query failure")


# --- Fixtures ---

@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def details_calls():
    return []


@pytest.fixture
def client(store, details_calls):
    """Test client with an in-memory store, fake auth and a fake TMDb lookup."""

    def fetch(movie_id: int):
        details_calls.append(movie_id)
        return {"id": movie_id, "poster_path": f"/poster-{movie_id}.jpg"}

    app.dependency_overrides[deps.get_document_store] = lambda: store
    app.dependency_overrides[auth.get_identity_provider] = lambda: FakeIdentityProvider()
    app.dependency_overrides[deps.get_movie_details_fetcher] = lambda: fetch
    yield TestClient(app)
    app.dependency_overrides.clear()


def _submit(client: TestClient, movie_id: int = 603, headers=AUTH, **body):
    payload = {"rating": 4, "comment": "Great", "movieTitle": "The Matrix", **body}
    return client.post(f"/api/movies/{movie_id}/reviews", json=payload, headers=headers)


# --- Auth requirement tests ---

class TestAuthRequired:
    """Writes and per-user reads require a valid bearer token."""

    def test_create_review_requires_auth(self, client: TestClient):
        response = client.post("/api/movies/603/reviews", json={"rating": 4})
        assert response.status_code == 401
        assert "Authentication required" in response.json()["error"]
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token_is_rejected(self, client: TestClient):
        response = client.get("/api/users/me/reviews", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_malformed_header_is_rejected(self, client: TestClient):
        response = client.get("/api/movies/603/reviews/mine", headers={"Authorization": "token-1"})
        assert response.status_code == 401

    def test_update_and_delete_require_auth(self, client: TestClient):
        assert client.put("/api/reviews/r1", json={"rating": 3}).status_code == 401
        assert client.delete("/api/reviews/r1").status_code == 401

    def test_movie_reviews_are_public(self, client: TestClient):
        response = client.get("/api/movies/603/reviews")
        assert response.status_code == 200
        assert response.json() == []


# --- Review lifecycle ---

class TestReviews:
    def test_create_review_returns_id_and_denormalizes_author(self, client: TestClient, store):
        response = _submit(client, comment="  Great  ", posterPath="/matrix.jpg")

        assert response.status_code == 201
        review_id = response.json()["id"]
        data = store.get("reviews", review_id).data
        assert data["userId"] == "user-1"
        assert data["userName"] == "Neo"
        assert data["userPhotoURL"] == "https://example.com/neo.png"
        assert data["comment"] == "Great"
        assert data["movieId"] == 603

    def test_missing_display_name_falls_back_to_anonymous(self, client: TestClient, store):
        review_id = _submit(client, headers=OTHER_AUTH).json()["id"]
        assert store.get("reviews", review_id).data["userName"] == "Anonymous User"

    def test_second_review_for_same_movie_is_rejected(self, client: TestClient, store):
        assert _submit(client).status_code == 201

        response = _submit(client, rating=2)

        assert response.status_code == 409
        assert response.json() == {"error": "You have already reviewed this movie"}
        assert store.count("reviews") == 1

    @pytest.mark.parametrize("rating", [0, 6])
    def test_out_of_range_rating_is_rejected(self, client: TestClient, store, rating: int):
        response = _submit(client, rating=rating)
        assert response.status_code == 422
        assert "rating" in response.json()["error"]
        assert store.count("reviews") == 0

    def test_movie_reviews_list_newest_first(self, client: TestClient):
        first = _submit(client).json()["id"]
        second = _submit(client, headers=OTHER_AUTH, rating=5).json()["id"]

        response = client.get("/api/movies/603/reviews")

        assert response.status_code == 200
        body = response.json()
        assert [r["id"] for r in body] == [second, first]
        assert body[1]["userName"] == "Neo"
        assert body[1]["userPhotoURL"] == "https://example.com/neo.png"
        assert body[1]["createdAt"] is not None
        assert body[1]["updatedAt"] is None

    def test_my_review_is_null_until_submitted(self, client: TestClient):
        assert client.get("/api/movies/603/reviews/mine", headers=AUTH).json() is None

        review_id = _submit(client).json()["id"]
        mine = client.get("/api/movies/603/reviews/mine", headers=AUTH).json()

        assert mine["id"] == review_id
        assert mine["rating"] == 4

    def test_update_review_sets_updated_at(self, client: TestClient):
        review_id = _submit(client).json()["id"]

        response = client.put(
            f"/api/reviews/{review_id}",
            json={"rating": 5, "comment": "Even better on rewatch"},
            headers=AUTH,
        )

        assert response.status_code == 200
        mine = client.get("/api/movies/603/reviews/mine", headers=AUTH).json()
        assert mine["rating"] == 5
        assert mine["comment"] == "Even better on rewatch"
        assert mine["movieTitle"] == "The Matrix"
        assert mine["updatedAt"] is not None

    def test_update_keeps_author_fields(self, client: TestClient, store):
        store.put(
            "reviews",
            "r1",
            {"userId": "user-1", "userName": "Thomas Anderson", "userPhotoURL": None, "movieId": 603, "rating": 2},
        )

        response = client.put("/api/reviews/r1", json={"rating": 4, "comment": "Grew on me"}, headers=AUTH)

        assert response.status_code == 200
        data = store.get("reviews", "r1").data
        assert data["rating"] == 4
        assert data["userName"] == "Thomas Anderson"
        assert data["userPhotoURL"] is None

    def test_update_of_missing_review_fails(self, client: TestClient):
        response = client.put("/api/reviews/missing", json={"rating": 3}, headers=AUTH)
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to update review"}

    def test_delete_review(self, client: TestClient):
        review_id = _submit(client).json()["id"]

        response = client.delete(f"/api/reviews/{review_id}", headers=AUTH)

        assert response.status_code == 204
        assert client.get("/api/movies/603/reviews/mine", headers=AUTH).json() is None
        assert client.get("/api/movies/603/reviews").json() == []


class TestMyReviews:
    def test_lists_only_my_reviews_with_posters_backfilled(self, client: TestClient, store, details_calls):
        store.put("reviews", "mine", {"userId": "user-1", "movieId": 11, "rating": 3, "posterPath": None})
        store.put("reviews", "theirs", {"userId": "user-2", "movieId": 12, "rating": 4})
        store.put("reviews", "done", {"userId": "user-1", "movieId": 13, "rating": 5, "posterPath": "/ok.jpg"})

        response = client.get("/api/users/me/reviews", headers=AUTH)

        assert response.status_code == 200
        body = {r["id"]: r for r in response.json()}
        assert set(body) == {"mine", "done"}
        assert body["mine"]["posterPath"] == "/poster-11.jpg"
        assert body["mine"]["posterUrl"] == "https://image.tmdb.org/t/p/w500/poster-11.jpg"
        assert sorted(details_calls) == [11, 12]
        assert store.get("reviews", "theirs").data["posterPath"] == "/poster-12.jpg"

    def test_lookup_error_does_not_break_listing(self, client: TestClient, store):
        store.put("reviews", "mine", {"userId": "user-1", "movieId": 11, "rating": 3})

        def broken_fetch(movie_id: int):
            raise KeyError("poster_path")

        app.dependency_overrides[deps.get_movie_details_fetcher] = lambda: broken_fetch
        response = client.get("/api/users/me/reviews", headers=AUTH)

        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == ["mine"]
        assert response.json()[0]["posterPath"] is None

    def test_failed_backfill_pass_still_lists_reviews(self, client: TestClient, store):
        store.put("reviews", "mine", {"userId": "user-1", "movieId": 11, "rating": 3, "posterPath": "/ok.jpg"})

        with patch("api.routers.reviews.backfill_review_poster_paths", side_effect=RuntimeError("pool died")):
            response = client.get("/api/users/me/reviews", headers=AUTH)

        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == ["mine"]


class TestStoreFailures:
    def test_listing_failure_yields_empty_list(self):
        app.dependency_overrides[deps.get_document_store] = lambda: FailingQueryStore()
        app.dependency_overrides[auth.get_identity_provider] = lambda: FakeIdentityProvider()
        try:
            client = TestClient(app)
            response = client.get("/api/movies/603/reviews")
            assert response.status_code == 200
            assert response.json() == []

            mine = client.get("/api/movies/603/reviews/mine", headers=AUTH)
            assert mine.status_code == 500
            assert mine.json() == {"error": "Failed to get user review"}
        finally:
            app.dependency_overrides.clear()
