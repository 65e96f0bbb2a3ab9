"""Runtime configuration model."""

from __future__ import annotations

from dataclasses import dataclass

from .validation import validate_runtime_constraints

DEFAULT_USER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:120.0) Gecko/20100101 Firefox/120.0",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Edge/120.0.0.0 Safari/537.36",
)
ALTERNATIVE_USER_AGENT = "curl/7.68.0"
DEFAULT_SEARCH_TIMEOUT = 5.0
DEFAULT_DOWNLOAD_TIMEOUT = 10.0
DEFAULT_ALTERNATIVE_TIMEOUT = 15.0
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_ALTERNATIVE_MAX_REDIRECTS = 10
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_MS = 1000
DEFAULT_MIN_IMAGE_BYTES = 512
DEFAULT_WORKERS = 4


@dataclass(frozen=True)
class FinderConfig:
    """Validated configuration used by the search pipeline."""

    queries: tuple[str, ...] = tuple()
    user_agents: tuple[str, ...] = DEFAULT_USER_AGENTS
    alternative_user_agent: str = ALTERNATIVE_USER_AGENT
    search_timeout: float = DEFAULT_SEARCH_TIMEOUT
    download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
    alternative_timeout: float = DEFAULT_ALTERNATIVE_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    alternative_max_redirects: int = DEFAULT_ALTERNATIVE_MAX_REDIRECTS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_ms: int = DEFAULT_BACKOFF_MS
    min_image_bytes: int = DEFAULT_MIN_IMAGE_BYTES
    workers: int = DEFAULT_WORKERS
    seed: int | None = None
    debug: bool = False
    show_progress: bool = True

    def __post_init__(self) -> None:
        validate_runtime_constraints(
            user_agents=self.user_agents,
            workers=self.workers,
            search_timeout=self.search_timeout,
            download_timeout=self.download_timeout,
            alternative_timeout=self.alternative_timeout,
            max_attempts=self.max_attempts,
            backoff_ms=self.backoff_ms,
            min_image_bytes=self.min_image_bytes,
        )
