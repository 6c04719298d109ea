"""Errors raised by the scraper.

Only input validation and fetch-level failures are errors. A heuristic that
finds nothing leaves its field empty instead of raising.
"""

from typing import Optional

__all__ = [
    "ScraperError",
    "URLValidationError",
    "ContentSignatureError",
    "ProductNotFoundError",
    "HostUnavailableError",
]


class ScraperError(Exception):
    """Base class for errors raised by this package."""
    pass


class URLValidationError(ScraperError, ValueError):
    """Raised when a URL or query is rejected before any request is made."""
    pass


class ContentSignatureError(ScraperError):
    """Raised when a fetched body matches a known failure page."""

    def __init__(self, message: str, url: Optional[str] = None, phrase: Optional[str] = None):
        super().__init__(message)
        self.url = url
        self.phrase = phrase


class ProductNotFoundError(ContentSignatureError):
    """The link does not correspond to any product."""
    pass


class HostUnavailableError(ContentSignatureError):
    """The host answered with a server error page or is blocking requests."""
    pass
