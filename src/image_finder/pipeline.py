"""Core orchestration pipeline."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from tqdm import tqdm

from .config import FinderConfig
from .downloader import ImageDownloader
from .errors import InvalidQueryError
from .fetchers import IdentityPool, make_session
from .models import CandidateUrl, ErrorKind, Failed, HttpSession, NotFound, SearchOutcome
from .search_backends import DEFAULT_BACKENDS, SearchBackend, fetch_candidates
from .validation import validate_query

INTERNAL_ERROR_MESSAGE = "Internal error while searching for an image for: {query}. Try again in a few seconds."


class ImageFinder:
    """Try backends in priority order and download the first candidate found."""

    def __init__(
        self,
        *,
        backends: Sequence[SearchBackend],
        session: HttpSession,
        downloader: ImageDownloader,
        identities: IdentityPool,
        rng: random.Random,
        search_timeout: float,
        logger: logging.Logger,
        debug: bool = False,
    ) -> None:
        self._backends = tuple(backends)
        self._session = session
        self._downloader = downloader
        self._identities = identities
        self._rng = rng
        self._search_timeout = search_timeout
        self._logger = logger
        self._debug = debug

    def find_candidates(self, query: str) -> list[CandidateUrl]:
        """Return the candidates of the first backend that yields any."""
        for backend in self._backends:
            self._logger.info("Trying %s for %r", backend.name, query)
            try:
                candidates = fetch_candidates(
                    backend,
                    query,
                    session=self._session,
                    identities=self._identities,
                    rng=self._rng,
                    timeout=self._search_timeout,
                    logger=self._logger,
                )
            except Exception as exc:
                self._logger.warning("%s failed unexpectedly: %s", backend.name, exc)
                continue
            if candidates:
                self._logger.info("Found %d candidate URLs via %s", len(candidates), backend.name)
                return candidates
        return []

    def search(self, query: str) -> SearchOutcome:
        """Resolve a query to image bytes or a classified failure; never raises."""
        try:
            cleaned = validate_query(query)
        except InvalidQueryError as exc:
            return Failed(kind=ErrorKind.INVALID_QUERY, message=str(exc), code=exc.code)

        try:
            candidates = self.find_candidates(cleaned)
            if not candidates:
                self._logger.warning("No image URL found for %r", cleaned)
                return NotFound(query=cleaned)
            winner = candidates[0]
            self._logger.info("Downloading %s", winner.url[:100])
            return self._downloader.download(winner.url, referer=self._origin_of(winner))
        except Exception as exc:
            self._logger.exception("Unexpected failure while searching for %r", cleaned)
            message = INTERNAL_ERROR_MESSAGE.format(query=cleaned)
            if self._debug:
                message = f"{message} Details: {exc}"
            return Failed(kind=ErrorKind.INTERNAL_ERROR, message=message)

    def _origin_of(self, candidate: CandidateUrl) -> str:
        for backend in self._backends:
            if backend.name == candidate.backend:
                return backend.origin
        return self._backends[0].origin


def build_finder(config: FinderConfig, *, logger: logging.Logger) -> ImageFinder:
    """Build concrete sessions, identity pool and downloader from configuration."""
    rng = random.Random(config.seed)
    identities = IdentityPool(config.user_agents)
    session = make_session(config.max_redirects)
    downloader = ImageDownloader(
        session=session,
        alternative_session=make_session(config.alternative_max_redirects),
        identities=identities,
        rng=rng,
        timeout=config.download_timeout,
        alternative_timeout=config.alternative_timeout,
        alternative_user_agent=config.alternative_user_agent,
        max_attempts=config.max_attempts,
        backoff_ms=config.backoff_ms,
        min_image_bytes=config.min_image_bytes,
        logger=logger,
    )
    return ImageFinder(
        backends=DEFAULT_BACKENDS,
        session=session,
        downloader=downloader,
        identities=identities,
        rng=rng,
        search_timeout=config.search_timeout,
        logger=logger,
        debug=config.debug,
    )


def search_many(
    finder: ImageFinder,
    queries: Sequence[str],
    *,
    workers: int,
    show_progress: bool = False,
) -> list[tuple[str, SearchOutcome]]:
    """Run independent queries concurrently, returning outcomes in input order."""
    with ThreadPoolExecutor(max_workers=workers) as executor:
        iterator = executor.map(finder.search, queries)
        if show_progress:
            iterator = tqdm(iterator, total=len(queries), desc="searching images")
        outcomes = list(iterator)
    return list(zip(queries, outcomes))


def run_pipeline(config: FinderConfig, *, logger: logging.Logger) -> list[tuple[str, SearchOutcome]]:
    """Build concrete dependencies and search every configured query."""
    finder = build_finder(config, logger=logger)
    return search_many(
        finder,
        config.queries,
        workers=config.workers,
        show_progress=config.show_progress,
    )
