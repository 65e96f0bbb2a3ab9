"""Validation and runtime guardrails."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from .errors import ConfigError, InvalidQueryError

MAX_QUERY_LENGTH = 100
FORBIDDEN_TERMS = ("explicit", "nsfw", "adult")

# Substrings marking inline data, vector art, tracking pixels and site chrome.
BLOCKED_URL_PATTERNS = (
    "data:image",
    ".svg",
    "logo",
    "icon",
    "avatar",
    "blank",
    "1x1",
)


def validate_query(query: str | None) -> str:
    """Return the trimmed query or raise InvalidQueryError."""
    cleaned = (query or "").strip()
    if not cleaned:
        raise InvalidQueryError(
            "MISSING_QUERY", 'Parameter "q" is required and cannot be empty'
        )
    if len(cleaned) > MAX_QUERY_LENGTH:
        raise InvalidQueryError(
            "QUERY_TOO_LONG",
            f"Search term is too long (maximum {MAX_QUERY_LENGTH} characters)",
        )
    lowered = cleaned.lower()
    if any(term in lowered for term in FORBIDDEN_TERMS):
        raise InvalidQueryError("FORBIDDEN_QUERY", "Search term is not allowed")
    return cleaned


def is_supported_url(url: str) -> bool:
    """Allow only absolute HTTP(S) URLs with a hostname."""
    parsed = urlparse(url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def is_acceptable_image_url(url: str | None) -> bool:
    """Return True for absolute HTTP(S) URLs that do not look like non-photo assets."""
    if not url or not url.startswith("http"):
        return False
    lowered = url.lower()
    if any(pattern in lowered for pattern in BLOCKED_URL_PATTERNS):
        return False
    try:
        return is_supported_url(url)
    except ValueError:
        return False


def load_lines_from_file(path: str) -> list[str]:
    """Load non-empty lines from a UTF-8 text file."""
    content = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in content.splitlines() if line.strip()]


def validate_runtime_constraints(
    *,
    user_agents: tuple[str, ...],
    workers: int,
    search_timeout: float,
    download_timeout: float,
    alternative_timeout: float,
    max_attempts: int,
    backoff_ms: int,
    min_image_bytes: int,
) -> None:
    """Validate CLI/runtime configuration and raise ConfigError on invalid values."""
    if not user_agents:
        raise ConfigError("At least one user agent is required.")
    if workers < 1:
        raise ConfigError("--workers must be >= 1.")
    if min(search_timeout, download_timeout, alternative_timeout) <= 0:
        raise ConfigError("Timeouts must be > 0.")
    if max_attempts < 1:
        raise ConfigError("max_attempts must be >= 1.")
    if backoff_ms < 0:
        raise ConfigError("backoff_ms must be >= 0.")
    if min_image_bytes < 0:
        raise ConfigError("min_image_bytes must be >= 0.")
