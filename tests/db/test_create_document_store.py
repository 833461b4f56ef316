from __future__ import annotations

import pytest

from movie_explorer.db import create_document_store
from movie_explorer.db.memory import InMemoryDocumentStore


def test_memory_backend_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCUMENT_STORE_BACKEND", " Memory ")
    assert isinstance(create_document_store(), InMemoryDocumentStore)


def test_explicit_backend_wins_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCUMENT_STORE_BACKEND", "firestore")
    assert isinstance(create_document_store("memory"), InMemoryDocumentStore)


def test_unknown_backend_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOCUMENT_STORE_BACKEND", raising=False)
    with pytest.raises(RuntimeError, match="Unknown DOCUMENT_STORE_BACKEND"):
        create_document_store("postgres")
