"""Field extraction heuristics for product pages.

Each function looks for one field and returns None (or an empty list)
when its pattern is absent. Nothing here raises on a miss.

Container-level extractors take one ``div`` of the page and return None
when that container is not the one they are looking for, so the
orchestrator can offer every container to every rule in a single pass.
"""

import math
from typing import Iterable, List, Optional, Tuple

from flipkart_scraper.config import (
    COMING_SOON_MARKER,
    CURRENCY_SYMBOL,
    F_ASSURED_ICON_FRAGMENT,
    HIGHLIGHTS_LABEL,
    OFFERS_LABEL,
    OUT_OF_STOCK_MARKER,
    SELLER_ELEMENT_ID,
    SPECIFICATIONS_LABEL,
    STAR_ICON_SRC,
)
from flipkart_scraper.dom import Node
from flipkart_scraper.logging_config import get_logger
from flipkart_scraper.models import (
    Offer,
    Seller,
    Specification,
    SpecificationGroup,
    StockStatus,
)

__all__ = [
    "extract_title",
    "extract_stock_status",
    "extract_thumbnails",
    "extract_seller",
    "extract_highlights",
    "extract_offers",
    "extract_specifications",
    "extract_rating",
    "has_f_assured_badge",
    "scan_price_container",
    "extract_price_pair",
    "parse_price",
    "parse_rating",
]

logger = get_logger("extractors")

PricePair = Tuple[Optional[int], Optional[int]]


# =============================================================================
# Value Parsing
# =============================================================================

def parse_rating(text: str, upper: float = 5.0) -> Optional[float]:
    """Parse a rating like '4.3'. Returns None outside 0..upper."""
    try:
        value = float(text.strip())
    except (ValueError, AttributeError):
        return None
    if not math.isfinite(value) or value < 0 or value > upper:
        return None
    return value


def parse_price(text: str) -> Optional[int]:
    """Parse a single '₹1,499' price tag into 1499.

    Returns None when the text does not start with the currency symbol,
    holds a second symbol (several prices glued together), or is not a
    whole number once thousands separators are removed.
    """
    text = text.strip()
    if not text.startswith(CURRENCY_SYMBOL):
        return None
    text = text[len(CURRENCY_SYMBOL):]
    if CURRENCY_SYMBOL in text:
        return None
    try:
        return int(text.replace(",", "").strip())
    except ValueError:
        return None


# =============================================================================
# Document-level Extractors
# =============================================================================

def extract_title(document: Node) -> Optional[str]:
    """First <h1> text, else the <title> text."""
    for selector in ("h1", "title"):
        element = document.select_one(selector)
        if element is None:
            continue
        text = element.all_text().strip()
        if text:
            return text
    logger.debug("No title found")
    return None


def extract_stock_status(body: str) -> StockStatus:
    """Stock status from plain-text markers in the raw body."""
    if COMING_SOON_MARKER in body:
        return StockStatus.COMING_SOON
    if OUT_OF_STOCK_MARKER in body:
        return StockStatus.OUT_OF_STOCK
    return StockStatus.IN_STOCK


def extract_thumbnails(document: Node) -> List[str]:
    """Image sources of the thumbnail rail.

    The rail is the first <ul> with no text at all (images only) whose
    list items hold at least one image.
    """
    for unordered_list in document.select("ul"):
        if unordered_list.all_text().strip():
            continue
        thumbnails = [
            src
            for list_item in unordered_list.select("li")
            for image in list_item.select("img")
            for src in [image.attr("src")]
            if src
        ]
        if thumbnails:
            return thumbnails
    logger.debug("No thumbnail rail found")
    return []


def extract_seller(document: Node) -> Optional[Seller]:
    """Seller name and rating from the seller block."""
    block = document.find_by_id(SELLER_ELEMENT_ID)
    if block is None:
        logger.debug("No seller block")
        return None

    inline = block.select_one("span")
    rating_box = block.select_one("div")

    name = inline.first_text() if inline is not None else ""
    if not name and rating_box is not None:
        name = rating_box.all_text().strip()
    if not name:
        return None

    rating = parse_rating(rating_box.all_text()) if rating_box is not None else None
    return Seller(name=name, rating=rating)


# =============================================================================
# Container-level Extractors
# =============================================================================

def extract_highlights(container: Node) -> Optional[List[str]]:
    """Bullet points of the "Highlights" section."""
    if not container.first_text().startswith(HIGHLIGHTS_LABEL):
        return None
    bullet_list = container.select_one("ul")
    if bullet_list is None:
        return []
    highlights = []
    for item in bullet_list.select("li"):
        text = item.all_text().strip()
        if text:
            highlights.append(text)
    return highlights


def _parse_offer(item: Node) -> Optional[Offer]:
    label = item.select_one("span")
    if label is None:
        return None

    category: Optional[str] = label.all_text().strip() or None
    sibling = label.next_sibling
    if sibling is not None and sibling.tag_name == "span":
        first = sibling.first_child
        description = first.text.strip() if first is not None and first.is_text else None
    else:
        # A lone label is the description itself
        description, category = category, None

    if not description:
        return None
    return Offer(description=description, category=category)


def extract_offers(container: Node) -> Optional[List[Offer]]:
    """Entries of the "Available offers" section."""
    if not container.first_text().startswith(OFFERS_LABEL):
        return None
    offers = []
    for item in container.select("li"):
        offer = _parse_offer(item)
        if offer is not None:
            offers.append(offer)
    return offers


def _parse_specification_table(table: Node) -> Optional[SpecificationGroup]:
    heading = table.previous_sibling
    first = heading.first_child if heading is not None else None
    if first is None or not first.is_text:
        return None

    specifications = []
    for row in table.select("tr"):
        cells = row.select("td")
        if len(cells) < 2:
            continue
        specifications.append(
            Specification(name=cells[0].all_text().strip(), value=cells[1].all_text().strip())
        )
    return SpecificationGroup(category=first.text.strip(), specifications=tuple(specifications))


def extract_specifications(container: Node) -> Optional[List[SpecificationGroup]]:
    """Specification tables, each titled by the element just before it."""
    if not container.first_text().startswith(SPECIFICATIONS_LABEL):
        return None
    groups = []
    for table in container.select("table"):
        group = _parse_specification_table(table)
        if group is None:
            logger.debug("Dropping specification table without a heading")
            continue
        groups.append(group)
    return groups


def extract_rating(container: Node) -> Optional[float]:
    """Rating shown next to the star icon.

    Only a container whose first image is the star icon qualifies; its
    leading text is the rating.
    """
    image = container.select_one("img")
    if image is None:
        return None
    src = image.attr("src")
    if src is None or src.strip() != STAR_ICON_SRC:
        return None
    return parse_rating(container.first_text())


def has_f_assured_badge(container: Node) -> bool:
    return any(
        F_ASSURED_ICON_FRAGMENT in (image.attr("src") or "")
        for image in container.select("img")
    )


def scan_price_container(
    container: Node, current_price: Optional[int] = None
) -> Optional[PricePair]:
    """Read the (current, original) pair out of one price container.

    A container qualifies when its leading text starts with the currency
    symbol. Its nested blocks are read in order: the first parsable price
    is the current price, the next block after it is the original price
    (falling back to the current one when unparsable). ``current_price``
    carries a current price found in an earlier container.

    Returns None when the container does not qualify.
    """
    if not container.first_text().startswith(CURRENCY_SYMBOL):
        return None

    original_price: Optional[int] = None
    for block in container.select("div"):
        text = block.all_text().strip()
        if not text.startswith(CURRENCY_SYMBOL):
            continue
        if CURRENCY_SYMBOL in text[len(CURRENCY_SYMBOL):]:
            continue
        price = parse_price(text)
        if current_price is None:
            current_price = price
        else:
            original_price = price if price is not None else current_price
            break
    return current_price, original_price


def extract_price_pair(containers: Iterable[Node]) -> PricePair:
    """Apply :func:`scan_price_container` over containers until both prices are set."""
    current_price: Optional[int] = None
    for container in containers:
        pair = scan_price_container(container, current_price)
        if pair is None:
            continue
        current_price, original_price = pair
        if original_price is not None:
            return current_price, original_price
    return current_price, None
