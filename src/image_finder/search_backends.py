"""Search backend strategy table and candidate fetching."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from urllib.parse import quote

from requests.exceptions import RequestException

from .extraction import ExtractionRule, extract_candidates
from .fetchers import IdentityPool, browser_headers
from .models import CandidateUrl, HttpSession


@dataclass(frozen=True)
class SearchBackend:
    """One image search provider: where to ask and how to read the answer."""

    name: str
    origin: str
    url_template: str
    rules: tuple[ExtractionRule, ...]
    limit: int

    def build_url(self, query: str) -> str:
        """Return the provider search URL for an already validated query."""
        return self.url_template.format(query=quote(query, safe=""))


BING = SearchBackend(
    name="bing",
    origin="https://www.bing.com",
    url_template="https://www.bing.com/images/search?q={query}&form=HDRSC2&first=1",
    rules=(
        ExtractionRule("a.iusc", json_attribute="m"),
        ExtractionRule(".iusc", json_attribute="m"),
        ExtractionRule('[class*="iusc"]', json_attribute="m"),
        ExtractionRule(".mimg", json_attribute="m"),
    ),
    limit=5,
)

DUCKDUCKGO = SearchBackend(
    name="duckduckgo",
    origin="https://duckduckgo.com",
    url_template="https://duckduckgo.com/?q={query}&t=h_&iax=images&ia=images",
    rules=(
        ExtractionRule(".tile--img__img", own_source=True),
        ExtractionRule(".js-images-link", own_source=True),
    ),
    limit=3,
)

DEFAULT_BACKENDS: tuple[SearchBackend, ...] = (BING, DUCKDUCKGO)


def fetch_candidates(
    backend: SearchBackend,
    query: str,
    *,
    session: HttpSession,
    identities: IdentityPool,
    rng: random.Random,
    timeout: float,
    logger: logging.Logger,
) -> list[CandidateUrl]:
    """Fetch one backend result page and extract candidate image URLs.

    Any transport failure or HTTP status >= 400 yields an empty list so the
    caller can fall back to the next backend.
    """
    url = backend.build_url(query)
    try:
        response = session.get(
            url,
            headers=browser_headers(identities.pick(rng)),
            timeout=timeout,
            allow_redirects=True,
        )
        response.raise_for_status()
        html = str(response.text or "")
    except RequestException as exc:
        logger.warning("%s search failed: %s", backend.name, exc)
        return []

    if not html:
        logger.debug("%s returned an empty page", backend.name)
        return []
    candidates = extract_candidates(html, backend.rules, backend=backend.name, limit=backend.limit)
    logger.debug("%s produced %d candidate URLs", backend.name, len(candidates))
    return candidates
