"""Failure text classification rules."""

from __future__ import annotations

from .models import ErrorKind

# First matching rule wins.
CLASSIFICATION_RULES: list[tuple[tuple[str, ...], ErrorKind]] = [
    (("timeout", "econnreset"), ErrorKind.SERVICE_TIMEOUT),
    (("403", "forbidden"), ErrorKind.ACCESS_BLOCKED),
    (("500", "502"), ErrorKind.UPSTREAM_ERROR),
]


def classify_error(message: str) -> ErrorKind:
    """Map raw failure text to an advisory error kind."""
    lowered = (message or "").lower()
    for needles, kind in CLASSIFICATION_RULES:
        if any(needle in lowered for needle in needles):
            return kind
    return ErrorKind.NOT_FOUND
