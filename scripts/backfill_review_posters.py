#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import sys

from movie_explorer.db import create_document_store
from movie_explorer.ingestion.poster_backfill import DEFAULT_CONCURRENCY, backfill_review_poster_paths
from movie_explorer.integrations.tmdb.client import resolve_api_key
from movie_explorer.utils.env import configure_logging, load_env


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="backfill_review_posters",
        description="Fill in missing posterPath values on review documents from TMDb movie details.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f"Concurrent TMDb lookups (default {DEFAULT_CONCURRENCY}).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Look up posters without writing to the store.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    load_env()
    configure_logging(level="DEBUG" if args.verbose else None)

    api_key = resolve_api_key()
    if not api_key:
        print("ERROR: TMDB_API_KEY must be set to fetch movie details.", file=sys.stderr)
        return 2

    store = create_document_store("firestore")
    summary = backfill_review_poster_paths(
        store,
        api_key=api_key,
        concurrency=args.workers,
        dry_run=args.dry_run,
    )

    for failure in summary.failures:
        logging.getLogger(__name__).debug(
            f"failed review_id={failure.review_id} movie_id={failure.movie_id} error={failure.message}"
        )

    print(
        "backfill_review_posters: "
        f"scanned={summary.scanned} candidates={summary.candidates} updated={summary.updated} "
        f"skipped={summary.skipped} failed={summary.failed}" + (" (dry-run)" if args.dry_run else "")
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
