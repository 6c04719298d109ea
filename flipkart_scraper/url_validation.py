"""URL validation and sanitization utilities.

Provides the domain check applied before any product fetch, and helpers
for turning scraped hrefs into absolute links.
"""

import re
from typing import Optional
from urllib.parse import urljoin, urlparse

from flipkart_scraper.config import BASE_URL, TARGET_DOMAIN
from flipkart_scraper.exceptions import URLValidationError

__all__ = [
    "validate_url",
    "sanitize_url",
    "is_absolute_link",
    "make_absolute",
    "URLValidationError",
]


def sanitize_url(url: str) -> str:
    """Sanitize a URL by stripping whitespace and control characters.

    Args:
        url: Raw URL string

    Returns:
        Sanitized URL string
    """
    if not url:
        return ""

    url = url.strip()
    url = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", url)
    url = url.replace("%00", "")

    return url


def validate_url(
    url: str,
    domain: Optional[str] = TARGET_DOMAIN,
) -> str:
    """Validate a URL before it is fetched.

    The host must *contain* ``domain`` so that subdomains such as
    ``dl.flipkart.com`` are accepted.

    Args:
        url: URL to validate
        domain: Domain fragment the host must contain (None disables the check)

    Returns:
        Sanitized URL

    Raises:
        URLValidationError: If URL is invalid or points at another site
    """
    if not url:
        raise URLValidationError("URL is empty")

    url = sanitize_url(url)

    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise URLValidationError(f"Failed to parse URL: {e}") from e

    scheme = parsed.scheme.lower()
    if scheme not in ("http", "https"):
        raise URLValidationError(f"Invalid URL scheme: {scheme or '(none)'}")

    host = (parsed.hostname or "").lower()
    if not host:
        raise URLValidationError("Domain name invalid.")

    if domain and domain not in host:
        raise URLValidationError(f"Only {domain} is supported, got host '{host}'")

    return url


def is_absolute_link(link: str) -> bool:
    """Check whether ``link`` is an absolute http(s) URL with a host."""
    if not link or any(ch.isspace() for ch in link):
        return False
    try:
        parsed = urlparse(link)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def make_absolute(href: str, base: str = BASE_URL) -> str:
    """Rewrite a relative href against the site origin."""
    href = sanitize_url(href)
    if is_absolute_link(href):
        return href
    return urljoin(base + "/", href)

