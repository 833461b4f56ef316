from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from movie_explorer.utils.env import configure_logging


def _configured_level(**kwargs) -> int:  # noqa: ANN003
    with patch("movie_explorer.utils.env.logging.basicConfig") as basic_config:
        configure_logging(**kwargs)
    return basic_config.call_args.kwargs["level"]


def test_log_level_env_overrides_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert _configured_level() == logging.WARNING


def test_explicit_level_overrides_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    assert _configured_level(level="DEBUG") == logging.DEBUG


def test_unknown_level_falls_back_to_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    assert _configured_level(default_level="chatty") == logging.INFO
