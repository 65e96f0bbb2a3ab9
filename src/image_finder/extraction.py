"""Pure extraction of candidate image URLs from search result pages."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from bs4 import BeautifulSoup
from bs4.element import Tag

from .models import CandidateUrl
from .validation import is_acceptable_image_url

IMAGE_SOURCE_ATTRIBUTES = ("src", "data-src")


@dataclass(frozen=True)
class ExtractionRule:
    """One CSS selector plus where to look for the image URL on matched elements.

    ``json_attribute`` names an inline JSON attribute carrying ``json_field``.
    ``own_source`` allows the element's own ``src``/``data-src`` before a
    descendant ``<img>`` is consulted.
    """

    selector: str
    json_attribute: str | None = None
    json_field: str = "murl"
    own_source: bool = False


def dedupe_preserve_order(items: list[str]) -> list[str]:
    """Dedupe values while preserving first-seen order."""
    output: list[str] = []
    seen: set[str] = set()
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        output.append(item)
    return output


def _from_inline_json(element: Tag, rule: ExtractionRule) -> str | None:
    raw = _attribute(element, rule.json_attribute)
    if not raw:
        return None
    try:
        payload: Any = json.loads(raw)
    except ValueError:
        # Truncated or malformed JSON: recover the field textually.
        match = re.search(rf'"{re.escape(rule.json_field)}":"([^"]+)"', raw)
        return match.group(1) if match else None
    value = payload.get(rule.json_field) if isinstance(payload, dict) else None
    return value if isinstance(value, str) else None


def _from_image_source(element: Tag, rule: ExtractionRule) -> str | None:
    sources = [element] if rule.own_source else []
    image = element.find("img")
    if isinstance(image, Tag):
        sources.append(image)
    for source in sources:
        for attribute in IMAGE_SOURCE_ATTRIBUTES:
            value = _attribute(source, attribute)
            if value:
                return value
    return None


def _attribute(element: Tag, name: str | None) -> str | None:
    if not name:
        return None
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value.strip() if isinstance(value, str) and value.strip() else None


# Tried in order for each element; the first acceptable URL wins.
FALLBACK_CHAIN: list[Callable[[Tag, ExtractionRule], str | None]] = [
    _from_inline_json,
    _from_image_source,
]


def url_from_element(element: Tag, rule: ExtractionRule) -> str | None:
    """Return the first acceptable image URL the fallback chain recovers."""
    for strategy in FALLBACK_CHAIN:
        url = strategy(element, rule)
        if url and is_acceptable_image_url(url):
            return url
    return None


def extract_candidates(
    html: str,
    rules: Sequence[ExtractionRule],
    *,
    backend: str,
    limit: int,
) -> list[CandidateUrl]:
    """Collect up to ``limit`` acceptable image URLs from a result page."""
    soup = BeautifulSoup(html or "", "html.parser")
    urls: list[str] = []
    for rule in rules:
        for element in soup.select(rule.selector)[:limit]:
            url = url_from_element(element, rule)
            if url:
                urls.append(url)
            urls = dedupe_preserve_order(urls)
            if len(urls) >= limit:
                return [CandidateUrl(url=item, backend=backend) for item in urls]
    return [CandidateUrl(url=item, backend=backend) for item in urls]
