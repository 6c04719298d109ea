"""Flipkart product page and search results scraper package."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from flipkart_scraper.config import BASE_URL, HEADERS, TARGET_DOMAIN
from flipkart_scraper.exceptions import (
    ContentSignatureError,
    HostUnavailableError,
    ProductNotFoundError,
    ScraperError,
    URLValidationError,
)
from flipkart_scraper.fetcher import HttpFetcher
from flipkart_scraper.models import (
    Offer,
    ProductRecord,
    SearchResultEntry,
    SearchResultSet,
    Seller,
    Specification,
    SpecificationGroup,
    StockStatus,
)
from flipkart_scraper.product import fetch_product, fetch_products, parse_product_page
from flipkart_scraper.search import build_search_url, parse_search_page, search_products

__all__ = [
    # Version
    "__version__",
    # Config
    "BASE_URL",
    "HEADERS",
    "TARGET_DOMAIN",
    # Errors
    "ScraperError",
    "URLValidationError",
    "ContentSignatureError",
    "ProductNotFoundError",
    "HostUnavailableError",
    # Models
    "StockStatus",
    "Seller",
    "Offer",
    "Specification",
    "SpecificationGroup",
    "ProductRecord",
    "SearchResultEntry",
    "SearchResultSet",
    # Core functions
    "HttpFetcher",
    "fetch_product",
    "fetch_products",
    "parse_product_page",
    "build_search_url",
    "parse_search_page",
    "search_products",
]
