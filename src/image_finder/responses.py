"""Mapping of search outcomes to HTTP-style responses."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from .errors import InvalidQueryError
from .models import ErrorKind, Failed, Found, NotFound, SearchOutcome
from .validation import validate_query

RETRY_SUGGESTION = "Try again in a few seconds"
REPHRASE_SUGGESTION = "Try different search terms"

# kind -> (status, code)
FAILURE_STATUS: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.SERVICE_TIMEOUT: (503, "SERVICE_TIMEOUT"),
    ErrorKind.ACCESS_BLOCKED: (502, "ACCESS_BLOCKED"),
    ErrorKind.UPSTREAM_ERROR: (502, "UPSTREAM_ERROR"),
    ErrorKind.NOT_FOUND: (404, "IMAGE_NOT_FOUND"),
    ErrorKind.UNKNOWN: (404, "IMAGE_NOT_FOUND"),
}


@dataclass(frozen=True)
class HttpResponse:
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | dict[str, Any] = b""


def _found_response(outcome: Found, query: str) -> HttpResponse:
    filename = f"{quote(query, safe='')}.{outcome.image_format.extension}"
    return HttpResponse(
        status=200,
        headers={
            "Content-Type": outcome.content_type,
            "Content-Disposition": f'inline; filename="{filename}"',
            "Cache-Control": "public, max-age=3600",
            "X-Image-Size": str(len(outcome.data)),
            "X-Content-Type-Detected": outcome.content_type,
        },
        body=outcome.data,
    )


def _internal_error(detail: str, debug: bool) -> HttpResponse:
    return HttpResponse(
        status=500,
        body={
            "error": "Internal server error",
            "code": "INTERNAL_ERROR",
            "message": detail if debug else "Try again later",
        },
    )


def outcome_to_response(outcome: SearchOutcome, query: str, *, debug: bool = False) -> HttpResponse:
    """Translate a search outcome into status, headers and body."""
    if isinstance(outcome, Found):
        return _found_response(outcome, query)
    if isinstance(outcome, NotFound):
        return HttpResponse(
            status=404,
            body={
                "error": f"No image found for: {outcome.query}",
                "code": "IMAGE_NOT_FOUND",
                "query": outcome.query,
                "suggestion": REPHRASE_SUGGESTION,
            },
        )
    if outcome.kind is ErrorKind.INVALID_QUERY:
        return HttpResponse(
            status=400, body={"error": outcome.message, "code": outcome.code or "INVALID_QUERY"}
        )
    if outcome.kind is ErrorKind.INTERNAL_ERROR:
        return _internal_error(outcome.message, debug)
    status, code = FAILURE_STATUS[outcome.kind]
    return HttpResponse(
        status=status,
        body={
            "error": outcome.message,
            "code": code,
            "query": query,
            "suggestion": RETRY_SUGGESTION if status == 503 else REPHRASE_SUGGESTION,
        },
    )


def handle_image_query(
    raw_query: str | None,
    search_fn: Callable[[str], SearchOutcome],
    *,
    logger: logging.Logger,
    debug: bool = False,
) -> HttpResponse:
    """Validate the raw query, run the search and render the response."""
    try:
        query = validate_query(raw_query)
    except InvalidQueryError as exc:
        return HttpResponse(status=400, body={"error": str(exc), "code": exc.code})

    logger.info("New search: %r", query)
    try:
        outcome = search_fn(query)
    except Exception as exc:
        logger.exception("Search handler failed for %r", query)
        return _internal_error(str(exc), debug)

    if isinstance(outcome, Failed):
        logger.warning("Search failed for %r: %s", query, outcome.message)
    return outcome_to_response(outcome, query, debug=debug)
