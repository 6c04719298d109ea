"""Search results extraction.

Cards are found by their per-card ``data-id`` attribute. Pages without it
are handled by anchoring on the "Showing N results" label and collecting
the repeated siblings that share the class list of the first card.
"""

import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import urlencode

from flipkart_scraper.config import (
    BASE_URL,
    RESULTS_LABEL_PREFIX,
    SEARCH_CARD_ATTRIBUTE,
    SEARCH_PATH,
    SEARCH_QUERY_PARAM,
    SPONSORED_MARKER,
)
from flipkart_scraper.dom import ClassSelector, Node, parse_document
from flipkart_scraper.exceptions import URLValidationError
from flipkart_scraper.extractors import extract_price_pair
from flipkart_scraper.fetcher import Fetcher, get_default_fetcher
from flipkart_scraper.logging_config import get_logger, log_scrape_event
from flipkart_scraper.models import SearchResultEntry, SearchResultSet
from flipkart_scraper.product import check_content_signatures
from flipkart_scraper.url_validation import make_absolute

__all__ = [
    "build_search_url",
    "find_result_cards",
    "parse_search_card",
    "parse_search_page",
    "search_products",
]

logger = get_logger("search")

RESULTS_LABEL_RE = re.compile(rf"^{RESULTS_LABEL_PREFIX}\b.*\bresults?\b", re.IGNORECASE)


def build_search_url(query: str) -> str:
    """Search endpoint URL with ``query`` as its only parameter.

    Raises:
        URLValidationError: If the query is blank
    """
    query = (query or "").strip()
    if not query:
        raise URLValidationError("Search query is empty")
    return f"{BASE_URL}{SEARCH_PATH}?{urlencode({SEARCH_QUERY_PARAM: query})}"


# =============================================================================
# Card Discovery
# =============================================================================

def _find_results_label(document: Node) -> Optional[Node]:
    for element in document.select("span, div, p"):
        if RESULTS_LABEL_RE.match(element.own_text()):
            return element
    return None


def _cards_near_label(label: Node) -> List[Node]:
    """Repeated siblings of the first card found walking up from the label."""
    for anchor in [label, *label.ancestors()]:
        first_card = next(anchor.next_element_siblings(), None)
        if first_card is None or first_card.select_one("a[href]") is None:
            continue
        selector = ClassSelector.from_classes(first_card.classes)
        if selector.is_empty:
            continue
        logger.debug(f"Cards discovered via results label, selector {selector}")
        return [first_card] + [
            sibling for sibling in first_card.next_element_siblings() if sibling.matches(selector)
        ]
    return []


def find_result_cards(document: Node) -> List[Node]:
    """Product cards of a search page, in page order."""
    cards = document.select(f"[{SEARCH_CARD_ATTRIBUTE}]")
    if cards:
        return cards

    label = _find_results_label(document)
    if label is None:
        logger.debug("No result cards and no results label")
        return []
    return _cards_near_label(label)


# =============================================================================
# Card Parsing
# =============================================================================

def _name_from_texts(texts: Iterable[str]) -> Optional[str]:
    """First text, or the one after it when the first is the sponsored tag."""
    texts = iter(texts)
    first = next(texts, None)
    if first == SPONSORED_MARKER:
        return next(texts, None)
    return first


def _card_name(card: Node, links: List[Node]) -> Optional[str]:
    primary = links[0]

    # The name block is styled like the link's last child
    last = primary.last_child
    selector = ClassSelector.from_classes(last.classes if last is not None else ())
    for element in card.select_matching(selector):
        name = _name_from_texts(element.texts())
        if name:
            return name

    if len(links) > 1:
        title = (links[1].attr("title") or "").strip()
        if title:
            return title

    return _name_from_texts(primary.texts())


def parse_search_card(card: Node) -> Optional[SearchResultEntry]:
    """Build one search entry, or None when the card has no link or name."""
    links = card.select("a[href]")
    if not links:
        return None

    name = _card_name(card, links)
    if not name:
        return None

    image = card.select_one("img[src]")
    current_price, original_price = extract_price_pair([card, *card.select("div")])
    return SearchResultEntry(
        product_name=name,
        product_link=make_absolute(links[0].attr("href") or ""),
        thumbnail=image.attr("src") if image is not None else None,
        current_price=current_price,
        original_price=original_price,
    )


def parse_search_page(html: str, query: str, query_url: str) -> SearchResultSet:
    """Extract the result set of an already fetched search page.

    Raises:
        HostUnavailableError: If the body is a server error page
    """
    check_content_signatures(html, query_url, check_not_found=False)
    document = parse_document(html)

    results = []
    for position, card in enumerate(find_result_cards(document), start=1):
        entry = parse_search_card(card)
        if entry is None:
            log_scrape_event(
                "card_dropped",
                {"query": query, "position": position},
                level=logging.DEBUG,
            )
            continue
        results.append(entry)

    log_scrape_event("search_extracted", {"query": query, "results": len(results)})
    return SearchResultSet(query=query, query_url=query_url, results=tuple(results))


def search_products(query: str, fetcher: Optional[Fetcher] = None) -> SearchResultSet:
    """Search the site and return the first results page.

    Raises:
        URLValidationError: Blank query (nothing is fetched)
        HostUnavailableError: Server error page
        requests.exceptions.RequestException: Transport failure
    """
    query_url = build_search_url(query)
    fetch = fetcher or get_default_fetcher()

    log_scrape_event("search_fetch", {"query": query, "url": query_url})
    html = fetch(query_url)
    return parse_search_page(html, query, query_url)
