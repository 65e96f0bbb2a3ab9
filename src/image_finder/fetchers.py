"""HTTP sessions, identity rotation and request headers."""

from __future__ import annotations

import random
from dataclasses import dataclass

from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

BROWSER_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
IMAGE_ACCEPT = "image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8"
ACCEPT_LANGUAGE = "en-US,en;q=0.9"


@dataclass(frozen=True)
class IdentityPool:
    """Read-only pool of client identity strings rotated across requests."""

    user_agents: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.user_agents:
            raise ValueError("IdentityPool requires at least one user agent.")

    def pick(self, rng: random.Random) -> str:
        """Choose one identity uniformly at random."""
        return rng.choice(self.user_agents)


def make_session(max_redirects: int) -> Session:
    """Create a requests session capped at ``max_redirects`` redirects."""
    session = Session()
    session.max_redirects = max_redirects
    # Attempts are counted by the callers, never by the transport.
    retry = Retry(total=0, redirect=False, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def browser_headers(user_agent: str) -> dict[str, str]:
    """Headers resembling a top-level page navigation in a desktop browser."""
    return {
        "User-Agent": user_agent,
        "Accept": BROWSER_ACCEPT,
        "Accept-Language": ACCEPT_LANGUAGE,
        "Accept-Encoding": "gzip, deflate",
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
    }


def image_headers(user_agent: str, origin: str) -> dict[str, str]:
    """Headers resembling a cross-site image load embedded in ``origin``."""
    return {
        "User-Agent": user_agent,
        "Accept": IMAGE_ACCEPT,
        "Accept-Language": ACCEPT_LANGUAGE,
        "Accept-Encoding": "gzip, deflate",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "Sec-Fetch-Dest": "image",
        "Sec-Fetch-Mode": "no-cors",
        "Sec-Fetch-Site": "cross-site",
        "Referer": origin.rstrip("/") + "/",
        "Origin": origin.rstrip("/"),
    }
