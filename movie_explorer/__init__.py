"""
Shared Movie Explorer library code.

This package holds code that is reused across:
- the FastAPI app in `api/`
- one-shot maintenance scripts in `scripts/`

App entrypoints (FastAPI routers, CLI scripts) should live outside this package and
import from `movie_explorer` rather than the other way around.
"""
from __future__ import annotations

import os
from functools import lru_cache

import firebase_admin
from firebase_admin import credentials


@lru_cache
def get_firebase_service_account_file() -> str | None:
    path = (os.getenv("FIREBASE_SERVICE_ACCOUNT_FILE") or "").strip()
    return path or None


@lru_cache
def get_firebase_project_id() -> str | None:
    project_id = (os.getenv("FIREBASE_PROJECT_ID") or "").strip()
    return project_id or None


def get_firebase_app(
    *, service_account_file: str | None = None, project_id: str | None = None
) -> firebase_admin.App:
    """
    Return the default Firebase app, initializing it on first use.

    Uses the service account key file when configured, otherwise falls back to
    application default credentials (e.g. on Cloud Run or with `gcloud auth`).
    """

    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    key_path = service_account_file or get_firebase_service_account_file()
    if key_path:
        if not os.path.exists(key_path):
            raise RuntimeError(f"Firebase service account file not found at {key_path}")
        cred = credentials.Certificate(key_path)
    else:
        cred = credentials.ApplicationDefault()

    options: dict[str, str] = {}
    resolved_project = project_id or get_firebase_project_id()
    if resolved_project:
        options["projectId"] = resolved_project
    return firebase_admin.initialize_app(cred, options or None)
