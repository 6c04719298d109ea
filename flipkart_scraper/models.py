"""Data models for product pages and search results.

All records are frozen; sequences are stored as tuples so a returned
record cannot be changed by the caller.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

__all__ = [
    "StockStatus",
    "Seller",
    "Offer",
    "Specification",
    "SpecificationGroup",
    "ProductRecord",
    "SearchResultEntry",
    "SearchResultSet",
]


def _plain(value: Any) -> Any:
    """Turn tuples into lists so ``to_dict`` output is JSON-shaped."""
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class StockStatus(Enum):
    IN_STOCK = "in_stock"
    OUT_OF_STOCK = "out_of_stock"
    COMING_SOON = "coming_soon"

    @property
    def in_stock(self) -> bool:
        return self is StockStatus.IN_STOCK


@dataclass(frozen=True)
class Seller:
    """Primary seller of a product."""

    name: str
    rating: Optional[float] = None


@dataclass(frozen=True)
class Offer:
    """One entry of the "Available offers" list.

    ``category`` is the leading label such as "Bank Offer" and is None when
    the entry has no label.
    """

    description: str
    category: Optional[str] = None


@dataclass(frozen=True)
class Specification:
    name: str
    value: str


@dataclass(frozen=True)
class SpecificationGroup:
    """A titled specification table, e.g. "General" or "Display Features"."""

    category: str
    specifications: Tuple[Specification, ...] = ()


@dataclass(frozen=True)
class ProductRecord:
    """Everything recovered from a single product page.

    ``share_url`` is never empty: it falls back to the requested URL.
    When the product is not in stock, seller, prices, rating and the
    f-assured flag are left unset.
    """

    share_url: str
    name: Optional[str] = None
    in_stock: bool = False
    current_price: Optional[int] = None
    original_price: Optional[int] = None
    product_id: Optional[str] = None
    rating: Optional[float] = None
    f_assured: bool = False
    highlights: Tuple[str, ...] = ()
    seller: Optional[Seller] = None
    thumbnails: Tuple[str, ...] = ()
    offers: Tuple[Offer, ...] = ()
    specifications: Tuple[SpecificationGroup, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class SearchResultEntry:
    """One product card from a search results page."""

    product_name: str
    product_link: str
    thumbnail: Optional[str] = None
    current_price: Optional[int] = None
    original_price: Optional[int] = None

    def fetch_product(self, fetcher=None) -> ProductRecord:
        """Resolve this entry into a full product record."""
        from flipkart_scraper.product import fetch_product

        return fetch_product(self.product_link, fetcher=fetcher)

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class SearchResultSet:
    """Search results in page order."""

    query: str
    query_url: str
    results: Tuple[SearchResultEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))
