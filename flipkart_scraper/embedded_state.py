"""Product id and share link from the inline page-bootstrap script.

The bootstrap blob is scanned as plain text around known markers. It is
not parsed as JSON: it is not guaranteed to be well-formed at the point
of interest.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from flipkart_scraper.config import (
    PRODUCT_ID_MARKER,
    SHARE_LINK_MARKER,
    STATE_SCRIPT_PREFIX,
)
from flipkart_scraper.dom import Node
from flipkart_scraper.logging_config import get_logger
from flipkart_scraper.url_validation import is_absolute_link

__all__ = [
    "EmbeddedState",
    "extract_embedded_state",
    "find_product_id",
    "find_share_url",
]

logger = get_logger("embedded_state")


@dataclass(frozen=True)
class EmbeddedState:
    product_id: Optional[str] = None
    share_url: Optional[str] = None


def find_product_id(blob: str) -> Optional[str]:
    """Text between the quotes following the first ``productId`` marker."""
    _, found, rest = blob.partition(PRODUCT_ID_MARKER)
    if not found:
        return None
    rest = rest.strip().strip('":')
    product_id, quote, _ = rest.partition('"')
    if not quote or not product_id:
        return None
    return product_id


def _marker_chunks(blob: str) -> Iterator[str]:
    """Split after every share marker, keeping the marker on its chunk."""
    parts = blob.split(SHARE_LINK_MARKER)
    for part in parts[:-1]:
        yield part + SHARE_LINK_MARKER
    yield parts[-1]


def find_share_url(blob: str) -> Optional[str]:
    """First chunk whose text after its last quote is an absolute link."""
    for chunk in _marker_chunks(blob):
        _, quote, candidate = chunk.rpartition('"')
        if quote and is_absolute_link(candidate):
            return candidate
    return None


def extract_embedded_state(document: Node) -> EmbeddedState:
    """Scan bootstrap scripts until one yields a share link.

    A bootstrap script carrying a ``productId`` marker replaces the id read
    so far (with None when its value is malformed); one without the marker
    leaves it as it was.
    """
    product_id: Optional[str] = None
    for script in document.select("script"):
        blob = script.all_text().lstrip()
        if not blob.startswith(STATE_SCRIPT_PREFIX):
            continue
        if PRODUCT_ID_MARKER in blob:
            product_id = find_product_id(blob)
        share_url = find_share_url(blob)
        if share_url:
            return EmbeddedState(product_id=product_id, share_url=share_url)

    logger.debug("No share link in bootstrap scripts")
    return EmbeddedState(product_id=product_id)
