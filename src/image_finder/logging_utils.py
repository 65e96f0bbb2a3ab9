"""Logging helpers."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
# Transport loggers that report every pooled connection and retry.
NOISY_LOGGERS = ("urllib3", "urllib3.connectionpool")


def configure_logging(verbose: bool = False) -> None:
    """Configure application logging once for CLI usage.

    Outside verbose mode the HTTP transport is limited to warnings so that
    per-attempt download logs stay readable.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger() -> logging.Logger:
    """Return the package logger shared by every component."""
    return logging.getLogger("image_finder")
