"""HTTP transport for product and search pages.

Anything callable as ``fetcher(url) -> str`` can stand in for
:class:`HttpFetcher`; the extraction code never touches the network
itself.
"""

import random
import threading
import time
from typing import Callable, Optional

import requests  # type: ignore[import-untyped]

from flipkart_scraper.config import (
    HEADERS,
    MAX_RETRIES,
    MAX_RETRY_BACKOFF,
    REQUEST_TIMEOUT,
    RETRY_BACKOFF_BASE,
    RETRY_STATUS_CODES,
)
from flipkart_scraper.logging_config import get_logger

__all__ = ["Fetcher", "HttpFetcher", "create_session", "get_default_fetcher"]

logger = get_logger("fetcher")

Fetcher = Callable[[str], str]


def create_session() -> requests.Session:
    """Create a requests Session carrying the static browser headers."""
    session = requests.Session()
    session.headers.update(HEADERS)
    session.headers.setdefault("Accept-Encoding", "gzip, deflate")
    return session


class HttpFetcher:
    """GET with exponential backoff on throttling, 5xx, timeouts and
    connection errors.

    When retries are exhausted the last ``requests`` exception propagates
    unchanged. Other HTTP errors are raised at once via
    ``raise_for_status``.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.session = session or create_session()
        self.timeout = timeout
        self.max_retries = max_retries
        self._sleep = sleep

    def _backoff(self, attempt: int) -> float:
        return min(RETRY_BACKOFF_BASE ** attempt, MAX_RETRY_BACKOFF) + random.uniform(0, 1)

    def __call__(self, url: str) -> str:
        return self.fetch(url)

    def fetch(self, url: str) -> str:
        """Fetch ``url`` and return the response body as text."""
        for attempt in range(self.max_retries + 1):
            last_attempt = attempt >= self.max_retries
            try:
                resp = self.session.get(url, timeout=self.timeout)
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                if last_attempt:
                    logger.error(f"Giving up on {url}: {type(e).__name__}: {e}")
                    raise
                backoff = self._backoff(attempt)
                logger.warning(
                    f"{type(e).__name__}, backing off {backoff:.1f}s "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                self._sleep(backoff)
                continue

            if resp.status_code in RETRY_STATUS_CODES and not last_attempt:
                backoff = self._backoff(attempt)
                logger.warning(
                    f"Received {resp.status_code}, backing off {backoff:.1f}s "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                self._sleep(backoff)
                continue

            try:
                resp.raise_for_status()
            except requests.exceptions.HTTPError as e:
                logger.error(f"HTTP error fetching {url}: {e}")
                raise
            logger.debug(f"Fetched {url} ({len(resp.text)} chars)")
            return str(resp.text)

        # Loop always returns or raises on its last attempt
        raise RuntimeError("unreachable")


# One fetcher (and so one Session) per thread: fetch_products workers
# never share a Session.
_thread_local = threading.local()


def get_default_fetcher() -> HttpFetcher:
    """Get or create the calling thread's fetcher."""
    fetcher = getattr(_thread_local, "fetcher", None)
    if fetcher is None:
        fetcher = HttpFetcher()
        _thread_local.fetcher = fetcher
    return fetcher
