"""
Authentication utilities for FastAPI.

Extracts user identity from Firebase ID tokens sent as bearer credentials.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from movie_explorer.identity import FirebaseIdentityProvider, IdentityError, IdentityProvider, UserIdentity

logger = logging.getLogger(__name__)


@lru_cache
def get_identity_provider() -> IdentityProvider:
    return FirebaseIdentityProvider()


def get_bearer_token(request: Request) -> str | None:
    """
    Extract Bearer token from Authorization header.

    Returns None if no token is present.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


async def get_current_user(
    request: Request,
    provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> UserIdentity | None:
    """
    Get the current user from the Firebase ID token.

    Returns None if no token or invalid token.
    """
    token = get_bearer_token(request)
    if not token:
        return None

    try:
        return provider.verify_token(token)
    except IdentityError as e:
        logger.warning(f"Failed to validate token: {e}")
        return None


async def require_user(user: Annotated[UserIdentity | None, Depends(get_current_user)]) -> UserIdentity:
    """
    Dependency that requires a valid authenticated user.

    Raises 401 if no token or invalid token.
    """
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Authentication required. Please provide a valid access token.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


# Type alias for dependency injection
CurrentUser = Annotated[UserIdentity, Depends(require_user)]
