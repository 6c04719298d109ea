"""Product page assembly.

Document-level fields (title, stock, thumbnails, seller) are read first.
Then every ``div`` is visited once, in document order, and offered to an
ordered list of container rules. A rule is retired as soon as it has
produced its value, and rules gated on stock never run for pages that
are not in stock. The bootstrap script is scanned last.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Set, Union

import requests  # type: ignore[import-untyped]

from flipkart_scraper.config import DEFAULT_MAX_WORKERS, NOT_FOUND_PHRASES, SERVER_ERROR_PHRASES
from flipkart_scraper.dom import Node, parse_document
from flipkart_scraper.embedded_state import extract_embedded_state
from flipkart_scraper.exceptions import (
    ContentSignatureError,
    HostUnavailableError,
    ProductNotFoundError,
)
from flipkart_scraper.extractors import (
    extract_highlights,
    extract_offers,
    extract_rating,
    extract_seller,
    extract_specifications,
    extract_stock_status,
    extract_thumbnails,
    extract_title,
    has_f_assured_badge,
    scan_price_container,
)
from flipkart_scraper.fetcher import Fetcher, get_default_fetcher
from flipkart_scraper.logging_config import get_logger, log_scrape_event
from flipkart_scraper.models import (
    Offer,
    ProductRecord,
    Seller,
    SpecificationGroup,
    StockStatus,
)
from flipkart_scraper.url_validation import validate_url

__all__ = [
    "ExtractionState",
    "ContainerRule",
    "CONTAINER_RULES",
    "run_container_rules",
    "check_content_signatures",
    "parse_product_page",
    "fetch_product",
    "fetch_products",
]

logger = get_logger("product")


@dataclass
class ExtractionState:
    """Mutable working state of one product page extraction."""

    url: str
    stock: StockStatus = StockStatus.IN_STOCK
    name: Optional[str] = None
    current_price: Optional[int] = None
    original_price: Optional[int] = None
    product_id: Optional[str] = None
    share_url: Optional[str] = None
    rating: Optional[float] = None
    f_assured: bool = False
    highlights: List[str] = field(default_factory=list)
    seller: Optional[Seller] = None
    thumbnails: List[str] = field(default_factory=list)
    offers: List[Offer] = field(default_factory=list)
    specifications: List[SpecificationGroup] = field(default_factory=list)
    completed: Set[str] = field(default_factory=set)

    @property
    def in_stock(self) -> bool:
        return self.stock.in_stock

    def to_record(self) -> ProductRecord:
        if not self.in_stock:
            # Stray matches never leak into stock-gated fields
            self.seller = None
            self.rating = None
            self.current_price = None
            self.original_price = None
            self.f_assured = False
        return ProductRecord(
            name=self.name,
            in_stock=self.in_stock,
            current_price=self.current_price,
            original_price=self.original_price,
            product_id=self.product_id,
            share_url=self.share_url or self.url,
            rating=self.rating,
            f_assured=self.f_assured,
            highlights=tuple(self.highlights),
            seller=self.seller,
            thumbnails=tuple(self.thumbnails),
            offers=tuple(self.offers),
            specifications=tuple(self.specifications),
        )


# =============================================================================
# Container Rules
# =============================================================================
# Each apply function returns True once its field is settled; the rule is
# then marked completed and not offered further containers.

@dataclass(frozen=True)
class ContainerRule:
    name: str
    apply: Callable[[Node, ExtractionState], bool]
    in_stock_only: bool = False
    precondition: Optional[Callable[[ExtractionState], bool]] = None

    def is_active(self, state: ExtractionState) -> bool:
        if self.name in state.completed:
            return False
        if self.in_stock_only and not state.in_stock:
            return False
        return self.precondition is None or self.precondition(state)


def _apply_highlights(container: Node, state: ExtractionState) -> bool:
    highlights = extract_highlights(container)
    if highlights is None:
        return False
    state.highlights = highlights
    return True


def _apply_offers(container: Node, state: ExtractionState) -> bool:
    offers = extract_offers(container)
    if offers is None:
        return False
    state.offers = offers
    return True


def _apply_specifications(container: Node, state: ExtractionState) -> bool:
    groups = extract_specifications(container)
    if groups is None:
        return False
    state.specifications = groups
    return True


def _apply_rating(container: Node, state: ExtractionState) -> bool:
    state.rating = extract_rating(container)
    return state.rating is not None


def _apply_f_assured(container: Node, state: ExtractionState) -> bool:
    if has_f_assured_badge(container):
        state.f_assured = True
    return state.f_assured


def _apply_price(container: Node, state: ExtractionState) -> bool:
    pair = scan_price_container(container, state.current_price)
    if pair is None:
        return False
    state.current_price, state.original_price = pair
    return state.original_price is not None


CONTAINER_RULES: Sequence[ContainerRule] = (
    ContainerRule("highlights", _apply_highlights),
    ContainerRule("offers", _apply_offers, in_stock_only=True),
    ContainerRule("specifications", _apply_specifications),
    ContainerRule("rating", _apply_rating, in_stock_only=True),
    # The badge is only looked for until the price has been found
    ContainerRule(
        "f_assured",
        _apply_f_assured,
        in_stock_only=True,
        precondition=lambda state: state.current_price is None,
    ),
    ContainerRule("price", _apply_price, in_stock_only=True),
)


def run_container_rules(
    containers: Sequence[Node],
    state: ExtractionState,
    rules: Sequence[ContainerRule] = CONTAINER_RULES,
) -> ExtractionState:
    """Offer each container to each active rule, in order."""
    for container in containers:
        active = [rule for rule in rules if rule.is_active(state)]
        if not active:
            break
        for rule in active:
            if rule.is_active(state) and rule.apply(container, state):
                state.completed.add(rule.name)
    return state


# =============================================================================
# Page Assembly
# =============================================================================

def check_content_signatures(body: str, url: str, check_not_found: bool = True) -> None:
    """Raise when the body is a known failure page.

    Search pages only check for server errors: an empty search is not a
    missing product.

    Raises:
        ProductNotFoundError: The link does not lead to a product
        HostUnavailableError: The host returned a server error page
    """
    for phrase in NOT_FOUND_PHRASES if check_not_found else ():
        if phrase in body:
            log_scrape_event(
                "content_signature_error",
                {"url": url, "phrase": phrase, "kind": "not_found"},
                level=logging.WARNING,
            )
            raise ProductNotFoundError(
                "Link provided doesn't correspond to any product", url=url, phrase=phrase
            )
    for phrase in SERVER_ERROR_PHRASES:
        if phrase in body:
            log_scrape_event(
                "content_signature_error",
                {"url": url, "phrase": phrase, "kind": "server_error"},
                level=logging.WARNING,
            )
            raise HostUnavailableError(
                "Internal Server Error. Host is down or is blocking requests.",
                url=url,
                phrase=phrase,
            )


def parse_product_page(html: str, url: str) -> ProductRecord:
    """Extract a product record from an already fetched page.

    Args:
        html: Raw response body
        url: The requested URL (share link fallback)

    Raises:
        ContentSignatureError: If the body is a not-found or server error page
    """
    check_content_signatures(html, url)
    document = parse_document(html)

    state = ExtractionState(url=url)
    state.name = extract_title(document)
    state.thumbnails = extract_thumbnails(document)
    state.stock = extract_stock_status(html)
    if state.in_stock:
        state.seller = extract_seller(document)
    else:
        logger.debug(f"Page is {state.stock.value}, skipping seller, price and rating")

    run_container_rules(document.select("div"), state)

    embedded = extract_embedded_state(document)
    state.product_id = embedded.product_id
    state.share_url = embedded.share_url

    if (
        state.current_price is not None
        and state.original_price is not None
        and state.current_price > state.original_price
    ):
        logger.warning(
            f"Current price {state.current_price} exceeds original price "
            f"{state.original_price} on {url}"
        )

    record = state.to_record()
    log_scrape_event("product_extracted", {
        "url": url,
        "in_stock": record.in_stock,
        "has_name": record.name is not None,
        "has_price": record.current_price is not None,
        "highlights": len(record.highlights),
        "offers": len(record.offers),
        "specification_groups": len(record.specifications),
    }, level=logging.DEBUG)
    return record


def fetch_product(url: str, fetcher: Optional[Fetcher] = None) -> ProductRecord:
    """Fetch and extract one product page.

    Args:
        url: Product page URL on the target site
        fetcher: Callable returning the page body (default: HTTP GET)

    Raises:
        URLValidationError: Off-site or malformed URL (nothing is fetched)
        ContentSignatureError: Not-found or server error page
        requests.exceptions.RequestException: Transport failure
    """
    url = validate_url(url)
    fetch = fetcher or get_default_fetcher()

    log_scrape_event("product_fetch", {"url": url})
    body = fetch(url)
    return parse_product_page(body, url)


def fetch_products(
    urls: Sequence[str],
    fetcher: Optional[Fetcher] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    return_exceptions: bool = False,
) -> List[Union[ProductRecord, Exception]]:
    """Fetch several product pages in parallel, keeping input order.

    Every URL is validated before any request is made.

    Args:
        urls: Product page URLs
        fetcher: Callable returning the page body (default: HTTP GET)
        max_workers: Thread pool size
        return_exceptions: Put a page's content or transport error in its
            slot of the result instead of raising it

    Raises:
        URLValidationError: Any URL is invalid (nothing is fetched)
        ContentSignatureError: A page failed and return_exceptions is False
        requests.exceptions.RequestException: Same, for transport failures
    """
    validated = [validate_url(url) for url in urls]
    if not validated:
        return []

    def fetch_one(url: str) -> Union[ProductRecord, Exception]:
        try:
            return fetch_product(url, fetcher=fetcher)
        except (ContentSignatureError, requests.exceptions.RequestException) as e:
            if not return_exceptions:
                raise
            log_scrape_event(
                "product_failed",
                {"url": url, "error": f"{type(e).__name__}: {e}"},
                level=logging.WARNING,
            )
            return e

    workers = max(1, min(max_workers, len(validated)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(fetch_one, validated))
