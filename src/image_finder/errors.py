"""Custom exceptions for the image finder domain."""


class ImageFinderError(Exception):
    """Base exception for this project."""


class ConfigError(ImageFinderError):
    """Raised when runtime configuration is invalid."""


class FetchError(ImageFinderError):
    """Raised when a download attempt returns an unusable payload."""


class InvalidQueryError(ImageFinderError):
    """Raised when a search query violates the input contract."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
