"""
log.py

Responsibility: Logger setup for the CLI and token redaction for logged text.

Loggers:
- `newrepo`: stage progress
- `newrepo.http`: one DEBUG line per GitHub API call
- `newrepo.git`: git commands and their output
"""

from __future__ import annotations

import logging
import re

_FORMAT = "%(message)s"
_VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# https://x-access-token:<token>@github.com/...
_URL_CREDENTIALS = re.compile(r"(https?://[^:/@\s]+:)[^@\s]+@")

# shorter values would mangle ordinary words in the message
_MIN_TOKEN_LENGTH = 8


def configure_logging(level: int = logging.INFO, handler: logging.Handler | None = None) -> logging.Logger:
    """
    Attach a single handler to the `newrepo` logger.

    Calling this again replaces the previous handler, so repeated `main()`
    calls (tests) do not duplicate output.
    """
    logger = logging.getLogger("newrepo")
    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_VERBOSE_FORMAT if level <= logging.DEBUG else _FORMAT))

    for old in list(logger.handlers):
        if getattr(old, "_newrepo_handler", False):
            logger.removeHandler(old)
    handler._newrepo_handler = True  # type: ignore[attr-defined]

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def redact_token(text: str, token: str | None = None) -> str:
    """Mask credentials embedded in URLs and any literal occurrence of a realistic `token`."""
    out = _URL_CREDENTIALS.sub(r"\1[REDACTED]@", text)
    if token and len(token) >= _MIN_TOKEN_LENGTH:
        out = out.replace(token, "[REDACTED]")
    return out
