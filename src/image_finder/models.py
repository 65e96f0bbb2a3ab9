"""Protocols and lightweight model types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, Union


class HttpSession(Protocol):
    """Contract for the injected HTTP fetch capability."""

    def get(self, url: str, **kwargs: Any) -> Any:
        """Issue a GET request and return a requests-like response."""


class ImageFormat(Enum):
    """Image formats recognised by signature, valued by MIME type."""

    JPEG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"
    WEBP = "image/webp"
    BMP = "image/bmp"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]


_EXTENSIONS = {
    ImageFormat.JPEG: "jpg",
    ImageFormat.PNG: "png",
    ImageFormat.GIF: "gif",
    ImageFormat.WEBP: "webp",
    ImageFormat.BMP: "bmp",
}


class ErrorKind(Enum):
    """Failure categories surfaced to callers."""

    SERVICE_TIMEOUT = "service_timeout"
    ACCESS_BLOCKED = "access_blocked"
    UPSTREAM_ERROR = "upstream_error"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"
    INVALID_QUERY = "invalid_query"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class CandidateUrl:
    """An image URL extracted from a backend result page."""

    url: str
    backend: str


@dataclass(frozen=True)
class Found:
    """Validated image bytes and their detected format."""

    data: bytes
    image_format: ImageFormat

    @property
    def content_type(self) -> str:
        return self.image_format.value


@dataclass(frozen=True)
class NotFound:
    """No backend produced a usable candidate URL."""

    query: str


@dataclass(frozen=True)
class Failed:
    """A classified failure with a human-readable message."""

    kind: ErrorKind
    message: str
    code: str | None = None


SearchOutcome = Union[Found, NotFound, Failed]
