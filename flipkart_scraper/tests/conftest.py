"""Shared test fixtures for the scraper test suite."""

import logging
from pathlib import Path
from typing import Dict, List

import pytest

from flipkart_scraper.config import STAR_ICON_SRC
from flipkart_scraper.logging_config import ROOT_LOGGER_NAME

PRODUCT_URL = "https://www.flipkart.com/acme-electric-kettle/p/itmkettle15l?pid=KETG2ZJ8HZBHKQFD"

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeFetcher:
    """Stands in for the HTTP transport and records every requested URL."""

    def __init__(self, pages: Dict[str, str] = None, default: str = None):
        self.pages = pages or {}
        self.default = default
        self.calls: List[str] = []

    def __call__(self, url: str) -> str:
        self.calls.append(url)
        if url in self.pages:
            return self.pages[url]
        if self.default is not None:
            return self.default
        raise AssertionError(f"Unexpected fetch: {url}")


def read_fixture(name: str) -> str:
    """Load an HTML fixture, filling in the rating star icon."""
    html = (FIXTURES_DIR / name).read_text(encoding="utf-8")
    return html.replace("__STAR_ICON__", STAR_ICON_SRC)


@pytest.fixture
def product_url():
    return PRODUCT_URL


@pytest.fixture
def in_stock_html():
    return read_fixture("product_in_stock.html")


@pytest.fixture
def coming_soon_html():
    return read_fixture("product_coming_soon.html")


@pytest.fixture
def out_of_stock_html():
    return read_fixture("product_out_of_stock.html")


@pytest.fixture
def search_html():
    return read_fixture("search_results.html")


@pytest.fixture
def search_grid_html():
    return read_fixture("search_results_grid.html")


@pytest.fixture
def fake_fetcher():
    """Factory for a FakeFetcher serving the given pages."""
    def _make(pages: Dict[str, str] = None, default: str = None) -> FakeFetcher:
        return FakeFetcher(pages, default)
    return _make


@pytest.fixture(autouse=True)
def reset_package_logging():
    """Drop handlers installed by a test so later tests don't write to closed streams."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
