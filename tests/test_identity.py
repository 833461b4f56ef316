from __future__ import annotations

from unittest.mock import patch

import pytest
from firebase_admin import auth as firebase_auth
from starlette.requests import Request

from api.auth import get_bearer_token
from movie_explorer.identity import FirebaseIdentityProvider, IdentityError, UserIdentity


def _request(authorization: str | None) -> Request:
    headers = [] if authorization is None else [(b"authorization", authorization.encode())]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("Bearer abc.def", "abc.def"),
        ("bearer abc.def", "abc.def"),
        ("Basic abc", None),
        ("Bearer", None),
        ("Bearer a b", None),
        (None, None),
    ],
)
def test_get_bearer_token(header: str | None, expected: str | None) -> None:
    assert get_bearer_token(_request(header)) == expected


def test_user_identity_from_firebase_claims() -> None:
    identity = UserIdentity.from_claims(
        {
            "uid": "abc123",
            "name": "Neo",
            "picture": "https://example.com/neo.png",
            "email": "neo@example.com",
        }
    )

    assert identity == UserIdentity(
        uid="abc123",
        display_name="Neo",
        photo_url="https://example.com/neo.png",
        email="neo@example.com",
    )


def test_user_identity_falls_back_to_sub_claim() -> None:
    assert UserIdentity.from_claims({"sub": "from-sub"}).uid == "from-sub"


def test_user_identity_requires_uid() -> None:
    with pytest.raises(IdentityError):
        UserIdentity.from_claims({"name": "Nobody"})


def test_firebase_provider_verifies_token() -> None:
    with (
        patch("movie_explorer.identity.get_firebase_app", return_value="app"),
        patch(
            "movie_explorer.identity.firebase_auth.verify_id_token",
            return_value={"uid": "u1", "name": "Trinity"},
        ) as verify,
    ):
        provider = FirebaseIdentityProvider()
        identity = provider.verify_token("good-token")

    assert identity.uid == "u1"
    assert identity.display_name == "Trinity"
    verify.assert_called_once_with("good-token", app="app", check_revoked=False)


def test_firebase_provider_maps_invalid_token_to_identity_error() -> None:
    with (
        patch("movie_explorer.identity.get_firebase_app", return_value="app"),
        patch(
            "movie_explorer.identity.firebase_auth.verify_id_token",
            side_effect=firebase_auth.InvalidIdTokenError("Token expired"),
        ),
    ):
        provider = FirebaseIdentityProvider()
        with pytest.raises(IdentityError, match="Invalid or expired ID token"):
            provider.verify_token("stale-token")
