"""Configuration and constants for the scraper."""

import os
from typing import Dict

from dotenv import load_dotenv

load_dotenv()  # FLIPKART_* overrides may come from a .env file

__all__ = [
    "BASE_URL",
    "TARGET_DOMAIN",
    "SEARCH_PATH",
    "SEARCH_QUERY_PARAM",
    "HEADERS",
    "REQUEST_TIMEOUT",
    "MAX_RETRIES",
    "RETRY_BACKOFF_BASE",
    "MAX_RETRY_BACKOFF",
    "RETRY_STATUS_CODES",
    "DEFAULT_MAX_WORKERS",
    "HTML_PARSER",
    "CURRENCY_SYMBOL",
    "COMING_SOON_MARKER",
    "OUT_OF_STOCK_MARKER",
    "NOT_FOUND_PHRASES",
    "SERVER_ERROR_PHRASES",
    "STAR_ICON_SRC",
    "F_ASSURED_ICON_FRAGMENT",
    "SELLER_ELEMENT_ID",
    "HIGHLIGHTS_LABEL",
    "OFFERS_LABEL",
    "SPECIFICATIONS_LABEL",
    "STATE_SCRIPT_PREFIX",
    "PRODUCT_ID_MARKER",
    "SHARE_LINK_MARKER",
    "SPONSORED_MARKER",
    "SEARCH_CARD_ATTRIBUTE",
    "RESULTS_LABEL_PREFIX",
]

BASE_URL = "https://www.flipkart.com"

# Product URLs are accepted when their host contains this domain
TARGET_DOMAIN = "flipkart.com"

# Search endpoint: BASE_URL + SEARCH_PATH + "?q=<query>"
SEARCH_PATH = "/search"
SEARCH_QUERY_PARAM = "q"

# Static request headers (a desktop browser profile)
HEADERS: Dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64; rv:109.0) Gecko/20100101 Firefox/118.0",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
}

# Request timeout (seconds)
REQUEST_TIMEOUT = float(os.getenv("FLIPKART_REQUEST_TIMEOUT", "15"))

# Retry settings with exponential backoff
MAX_RETRIES = int(os.getenv("FLIPKART_MAX_RETRIES", "3"))
RETRY_BACKOFF_BASE = 2.0  # Base for exponential backoff (2^attempt seconds)
MAX_RETRY_BACKOFF = 30.0  # Upper bound for a single backoff sleep
RETRY_STATUS_CODES = {429, 500, 502, 503, 504}  # Status codes to retry on

# Thread pool size when resolving several product pages at once
DEFAULT_MAX_WORKERS = 4

# BeautifulSoup backend
HTML_PARSER = "html.parser"


# =============================================================================
# Page Markers
# =============================================================================
# Plain-text signals the extraction heuristics key on.

CURRENCY_SYMBOL = "₹"

COMING_SOON_MARKER = "Coming Soon"
OUT_OF_STOCK_MARKER = "currently out of stock"

# Body phrases that mean the fetch itself failed
NOT_FOUND_PHRASES = ("has been moved or deleted", "not right!")
SERVER_ERROR_PHRASES = ("Internal Server Error",)

# Inline SVG used as the rating star next to the product rating
STAR_ICON_SRC = (
    "data:image/svg+xml;base64,PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciIHdpZHRo"
    "PSIxMyIgaGVpZ2h0PSIxMiI+PHBhdGggZmlsbD0iI0ZGRiIgZD0iTTYuNSA5LjQzOWwtMy42NzQgMi4yMy45NC00"
    "LjI2LTMuMjEtMi44ODMgNC4yNTQtLjQwNEw2LjUuMTEybDEuNjkgNC4wMSA0LjI1NC40MDQtMy4yMSAyLjg4Mi45"
    "NCA0LjI2eiIvPjwvc3ZnPg=="
)

# Badge image shown on f-assured listings
F_ASSURED_ICON_FRAGMENT = "fa_62673a.png"

SELLER_ELEMENT_ID = "sellerName"

# Leading text of the product page sections
HIGHLIGHTS_LABEL = "Highlights"
OFFERS_LABEL = "Available offers"
SPECIFICATIONS_LABEL = "Specifications"

# Inline bootstrap script carrying the product id and share link
STATE_SCRIPT_PREFIX = "window.__INITIAL_STATE__"
PRODUCT_ID_MARKER = "productId"
SHARE_LINK_MARKER = "product.share.pp"

# Search result pages
SPONSORED_MARKER = "Sponsored"
SEARCH_CARD_ATTRIBUTE = "data-id"
RESULTS_LABEL_PREFIX = "Showing"
