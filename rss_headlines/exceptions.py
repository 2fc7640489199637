from __future__ import annotations

from typing import Optional


class HeadlineError(Exception):
    """Base class for errors raised by rss_headlines."""


class FetchError(HeadlineError):
    """Raised when the feed cannot be retrieved (transport error, timeout, non-200)."""

    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(HeadlineError):
    """Raised when a feed document is malformed or holds no usable items."""


class InvalidParameterError(HeadlineError, ValueError):
    """Raised for unsupported export formats, bad limits or oversized filters."""
