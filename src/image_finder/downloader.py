"""Image download with a bounded retry ladder and one alternative attempt."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlparse

from requests.exceptions import RequestException

from .classification import classify_error
from .errors import FetchError
from .fetchers import IdentityPool, image_headers
from .models import ErrorKind, Failed, Found, HttpSession
from .sniffing import MIN_IMAGE_BYTES, sniff_valid_image

SleepFn = Callable[[float], None]


class RetryAction(Enum):
    RETRY = "retry"
    ALTERNATIVE = "alternative"


@dataclass(frozen=True)
class RetryState:
    """Position in the primary attempt ladder."""

    attempt: int = 1
    elapsed_ms: int = 0


@dataclass(frozen=True)
class RetryDecision:
    action: RetryAction
    delay_ms: int
    state: RetryState


def advance_retry(state: RetryState, *, max_attempts: int, backoff_ms: int) -> RetryDecision:
    """Return what follows a failed primary attempt.

    Attempt ``n`` below ``max_attempts`` is followed by a delay of
    ``n * backoff_ms``; the final attempt hands over to the alternative
    strategy immediately.
    """
    if state.attempt >= max_attempts:
        return RetryDecision(RetryAction.ALTERNATIVE, 0, state)
    delay_ms = state.attempt * backoff_ms
    next_state = RetryState(attempt=state.attempt + 1, elapsed_ms=state.elapsed_ms + delay_ms)
    return RetryDecision(RetryAction.RETRY, delay_ms, next_state)


class ImageDownloader:
    """Download and validate image bytes for a single candidate URL."""

    def __init__(
        self,
        *,
        session: HttpSession,
        alternative_session: HttpSession,
        identities: IdentityPool,
        rng: random.Random,
        timeout: float,
        alternative_timeout: float,
        alternative_user_agent: str,
        max_attempts: int,
        backoff_ms: int,
        logger: logging.Logger,
        min_image_bytes: int = MIN_IMAGE_BYTES,
        sleep_fn: SleepFn = time.sleep,
    ) -> None:
        self._session = session
        self._alternative_session = alternative_session
        self._identities = identities
        self._rng = rng
        self._timeout = timeout
        self._alternative_timeout = alternative_timeout
        self._alternative_user_agent = alternative_user_agent
        self._max_attempts = max_attempts
        self._backoff_ms = backoff_ms
        self._min_image_bytes = min_image_bytes
        self._sleep_fn = sleep_fn
        self._logger = logger

    def download(self, url: str, *, referer: str) -> Found | Failed:
        state = RetryState()
        while True:
            try:
                return self._primary_attempt(url, referer)
            except (RequestException, FetchError) as exc:
                self._logger.warning(
                    "Download attempt %d/%d failed for %s: %s",
                    state.attempt,
                    self._max_attempts,
                    url,
                    exc,
                )
            decision = advance_retry(
                state, max_attempts=self._max_attempts, backoff_ms=self._backoff_ms
            )
            if decision.action is RetryAction.ALTERNATIVE:
                break
            self._sleep_fn(decision.delay_ms / 1000.0)
            state = decision.state

        self._logger.info("Primary attempts exhausted for %s; trying alternative download", url)
        return self._alternative_attempt(url)

    def _primary_attempt(self, url: str, referer: str) -> Found:
        response = self._session.get(
            url,
            headers=image_headers(self._identities.pick(self._rng), referer),
            timeout=self._timeout,
            allow_redirects=True,
        )
        response.raise_for_status()
        return self._validated(bytes(response.content or b""))

    def _alternative_attempt(self, url: str) -> Found | Failed:
        try:
            response = self._alternative_session.get(
                url,
                headers={"User-Agent": self._alternative_user_agent},
                timeout=self._alternative_timeout,
                allow_redirects=True,
            )
            return self._validated(bytes(response.content or b""))
        except FetchError as exc:
            self._logger.warning("Alternative download rejected for %s: %s", url, exc)
            return Failed(
                kind=ErrorKind.UNKNOWN,
                message=f"No download strategy produced a valid image for {url}: {exc}",
            )
        except RequestException as exc:
            self._logger.warning("Alternative download failed for %s: %s", url, exc)
            return Failed(
                kind=self._transport_kind(str(exc), url),
                message=f"All download strategies failed for {url}. Last error: {exc}",
            )

    def _validated(self, data: bytes) -> Found:
        image_format = sniff_valid_image(data, self._min_image_bytes)
        if image_format is None:
            raise FetchError(f"Invalid or too small image payload ({len(data)} bytes)")
        return Found(data=data, image_format=image_format)

    @staticmethod
    def _transport_kind(error_text: str, url: str) -> ErrorKind:
        # requests echoes the URL (or its path); digits in it must not drive the kind.
        parsed = urlparse(url)
        for fragment in (url, parsed.path, parsed.query):
            if fragment:
                error_text = error_text.replace(fragment, "")
        kind = classify_error(error_text)
        return ErrorKind.UNKNOWN if kind is ErrorKind.NOT_FOUND else kind
