from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv


def load_env(*, override: bool = False) -> Path | None:
    repo_root = Path(__file__).resolve().parents[2]
    candidates = [
        repo_root / ".env",
        Path.cwd() / ".env",
    ]
    for path in candidates:
        if path.is_file():
            load_dotenv(dotenv_path=path, override=override)
            return path
    return None


def configure_logging(default_level: str = "INFO", *, level: str | None = None) -> None:
    """An explicit `level` wins over LOG_LEVEL, which wins over `default_level`."""
    level_name = (level or os.getenv("LOG_LEVEL") or default_level).strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
