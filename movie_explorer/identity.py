"""
Identity provider adapter (Firebase Authentication).

Sign-in and sign-out happen client-side; the backend only verifies the ID
token sent as a bearer credential and reads the uid, display name, photo URL
and email from its claims.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping

from firebase_admin import auth as firebase_auth

from movie_explorer import get_firebase_app

logger = logging.getLogger(__name__)


class IdentityError(RuntimeError):
    """Raised when a bearer token cannot be verified."""

    pass


@dataclass(frozen=True)
class UserIdentity:
    uid: str
    display_name: str | None = None
    photo_url: str | None = None
    email: str | None = None

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> UserIdentity:
        uid = str(claims.get("uid") or claims.get("user_id") or claims.get("sub") or "").strip()
        if not uid:
            raise IdentityError("Token claims carry no user id.")
        return cls(
            uid=uid,
            display_name=claims.get("name"),
            photo_url=claims.get("picture"),
            email=claims.get("email"),
        )


class IdentityProvider(ABC):
    @abstractmethod
    def verify_token(self, token: str) -> UserIdentity:
        """Return the identity behind `token` or raise `IdentityError`."""
        pass


class FirebaseIdentityProvider(IdentityProvider):
    def __init__(self, *, check_revoked: bool = False) -> None:
        self._app = get_firebase_app()
        self._check_revoked = check_revoked

    def verify_token(self, token: str) -> UserIdentity:
        try:
            claims = firebase_auth.verify_id_token(token, app=self._app, check_revoked=self._check_revoked)
        except (
            ValueError,
            firebase_auth.InvalidIdTokenError,
            firebase_auth.UserDisabledError,
            firebase_auth.CertificateFetchError,
        ) as exc:
            logger.warning(f"Failed to validate token: {exc}")
            raise IdentityError("Invalid or expired ID token.") from exc
        return UserIdentity.from_claims(claims)
