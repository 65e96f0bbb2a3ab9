"""CLI entrypoint for image-finder."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence

from .config import DEFAULT_USER_AGENTS, DEFAULT_WORKERS, FinderConfig
from .errors import ConfigError
from .logging_utils import configure_logging, get_logger
from .models import Found, SearchOutcome
from .pipeline import run_pipeline
from .responses import outcome_to_response
from .validation import load_lines_from_file


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Image Finder - fetch the first usable web image for a search term."
    )
    parser.add_argument("queries", nargs="*", help="Search terms (quote multi-word terms).")
    parser.add_argument("--queries-file", help="Path to query file (one query per line).")
    parser.add_argument(
        "--user-agents-file",
        help="Identity pool file, one user agent per line (or set IMAGE_FINDER_USER_AGENTS_FILE).",
    )
    parser.add_argument(
        "--workers", type=int, default=DEFAULT_WORKERS, help="Queries searched concurrently."
    )
    parser.add_argument("--seed", type=int, help="Seed for identity selection.")
    parser.add_argument(
        "--raw", action="store_true", help="Write the image bytes of a single query to stdout."
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Include internal error details in failures (or set IMAGE_FINDER_DEBUG=1).",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable tqdm progress bars.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse and pre-validate CLI input."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not (args.queries or args.queries_file):
        parser.error("Provide at least one query or --queries-file.")
    if args.raw and (args.queries_file or len(args.queries) != 1):
        parser.error("--raw requires exactly one query.")
    return args


def _materialize_queries(args: argparse.Namespace) -> tuple[str, ...]:
    queries = list(args.queries or [])
    if args.queries_file:
        queries.extend(load_lines_from_file(args.queries_file))
    return tuple(queries)


def _materialize_user_agents(args: argparse.Namespace) -> tuple[str, ...]:
    path = args.user_agents_file or os.getenv("IMAGE_FINDER_USER_AGENTS_FILE")
    if path:
        return tuple(load_lines_from_file(path))
    return DEFAULT_USER_AGENTS


def namespace_to_config(args: argparse.Namespace) -> FinderConfig:
    """Convert CLI args to validated FinderConfig."""
    debug = bool(args.debug or os.getenv("IMAGE_FINDER_DEBUG") == "1")
    queries = _materialize_queries(args)
    if not queries:
        raise ConfigError("No queries to search: the queries file is empty.")
    return FinderConfig(
        queries=queries,
        user_agents=_materialize_user_agents(args),
        workers=args.workers,
        seed=args.seed,
        debug=debug,
        show_progress=not (args.no_progress or args.raw),
    )


def format_outcome(query: str, outcome: SearchOutcome, *, debug: bool = False) -> str:
    """Render one summary line for a query outcome."""
    response = outcome_to_response(outcome, query, debug=debug)
    if isinstance(response.body, dict):
        return f"{response.status} {response.body.get('code', '')} {query!r}: {response.body.get('error', '')}"
    return (
        f"{response.status} {response.headers['Content-Type']} {query!r}: "
        f"{response.headers['X-Image-Size']} bytes"
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    configure_logging(args.verbose)
    logger = get_logger()
    try:
        config = namespace_to_config(args)
    except (ConfigError, OSError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    results = run_pipeline(config, logger=logger)
    if args.raw:
        query, outcome = results[0]
        if isinstance(outcome, Found):
            sys.stdout.buffer.write(outcome.data)
            sys.stdout.buffer.flush()
            return 0
        logger.error("%s", format_outcome(query, outcome, debug=config.debug))
        return 1

    for query, outcome in results:
        sys.stdout.write(format_outcome(query, outcome, debug=config.debug) + "\n")
    return 0 if all(isinstance(outcome, Found) for _, outcome in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
