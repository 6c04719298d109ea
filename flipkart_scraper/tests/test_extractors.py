"""Tests for the individual field extractors."""

import pytest

from flipkart_scraper.config import STAR_ICON_SRC
from flipkart_scraper.dom import parse_document
from flipkart_scraper.extractors import (
    extract_highlights,
    extract_offers,
    extract_price_pair,
    extract_rating,
    extract_seller,
    extract_specifications,
    extract_stock_status,
    extract_thumbnails,
    extract_title,
    has_f_assured_badge,
    parse_price,
    parse_rating,
    scan_price_container,
)
from flipkart_scraper.models import Offer, StockStatus

FA_ICON = "https://static-assets-web.flixcart.com/www/linchpin/fk-cp-zion/img/fa_62673a.png"


def first_div(html):
    return parse_document(html).select_one("div")


class TestValueParsing:
    def test_parse_price(self):
        assert parse_price("₹1,499") == 1499
        assert parse_price("  ₹100 ") == 100

    def test_parse_price_rejects_compound_and_unprefixed(self):
        assert parse_price("₹1,499₹2,999") is None
        assert parse_price("1,499") is None
        assert parse_price("₹12.50") is None

    def test_parse_rating_range(self):
        assert parse_rating("4.3") == pytest.approx(4.3)
        assert parse_rating("0") == 0.0
        assert parse_rating("5.5") is None
        assert parse_rating("-1") is None
        assert parse_rating("nan") is None
        assert parse_rating("Good") is None


class TestTitle:
    def test_heading_wins(self):
        doc = parse_document("<title>Page title</title><h1> Product <span>Name</span> </h1>")
        assert extract_title(doc) == "Product Name"

    def test_falls_back_to_title(self):
        doc = parse_document("<html><head><title>Page title</title></head><body></body></html>")
        assert extract_title(doc) == "Page title"

    def test_absent_is_none(self):
        assert extract_title(parse_document("<div>nothing</div>")) is None


class TestStockStatus:
    def test_in_stock_by_default(self):
        assert extract_stock_status("<div>Buy now</div>") is StockStatus.IN_STOCK

    def test_coming_soon(self):
        status = extract_stock_status("<div>Coming Soon</div>")
        assert status is StockStatus.COMING_SOON
        assert not status.in_stock

    def test_out_of_stock(self):
        status = extract_stock_status("<div>This item is currently out of stock</div>")
        assert status is StockStatus.OUT_OF_STOCK

    def test_coming_soon_takes_precedence(self):
        body = "<div>Coming Soon</div><div>currently out of stock</div>"
        assert extract_stock_status(body) is StockStatus.COMING_SOON


class TestThumbnails:
    def test_first_image_only_list(self):
        doc = parse_document(
            "<ul><li>Menu</li></ul>"
            "<ul><li><img src='a.jpg'></li><li><img src='b.jpg'><img src='c.jpg'></li></ul>"
            "<ul><li><img src='later.jpg'></li></ul>"
        )
        assert extract_thumbnails(doc) == ["a.jpg", "b.jpg", "c.jpg"]

    def test_list_with_captions_is_skipped(self):
        doc = parse_document("<ul><li><img src='a.jpg'>Caption</li></ul>")
        assert extract_thumbnails(doc) == []

    def test_empty_list_does_not_stop_search(self):
        doc = parse_document("<ul><li></li></ul><ul><li><img src='x.jpg'></li></ul>")
        assert extract_thumbnails(doc) == ["x.jpg"]


class TestSeller:
    def test_name_and_rating(self):
        doc = parse_document(
            '<div id="sellerName"><span><span>RetailNet</span><div>4.6<img src="s.svg"></div></span></div>'
        )
        seller = extract_seller(doc)
        assert seller.name == "RetailNet"
        assert seller.rating == pytest.approx(4.6)

    def test_name_falls_back_to_block_text(self):
        doc = parse_document('<div id="sellerName"><div> SuperComNet </div></div>')
        seller = extract_seller(doc)
        assert seller.name == "SuperComNet"
        assert seller.rating is None

    def test_missing_block(self):
        assert extract_seller(parse_document("<div>no seller</div>")) is None

    def test_empty_name(self):
        assert extract_seller(parse_document('<div id="sellerName"><span> </span></div>')) is None


class TestHighlights:
    def test_collects_list_items(self):
        div = first_div("<div><div>Highlights</div><ul><li>A</li><li>B</li></ul></div>")
        assert extract_highlights(div) == ["A", "B"]

    def test_other_container(self):
        assert extract_highlights(first_div("<div>Description<ul><li>A</li></ul></div>")) is None

    def test_only_first_list(self):
        div = first_div("<div>Highlights<ul><li>A</li></ul><ul><li>B</li></ul></div>")
        assert extract_highlights(div) == ["A"]


class TestOffers:
    def test_category_and_description(self):
        div = first_div(
            "<div>Available offers<ul>"
            "<li><span>Bank Offer</span><span>10% off on Axis Bank</span><span>T&amp;C</span></li>"
            "</ul></div>"
        )
        assert extract_offers(div) == [Offer(category="Bank Offer", description="10% off on Axis Bank")]

    def test_lone_label_becomes_description(self):
        div = first_div("<div>Available offers<ul><li><span>No cost EMI</span></li></ul></div>")
        assert extract_offers(div) == [Offer(category=None, description="No cost EMI")]

    def test_non_span_sibling_becomes_description(self):
        div = first_div(
            "<div>Available offers<ul><li><span>Partner Offer</span><div>details</div></li></ul></div>"
        )
        assert extract_offers(div) == [Offer(category=None, description="Partner Offer")]

    def test_items_without_text_are_dropped(self):
        div = first_div(
            "<div>Available offers<ul><li><img src='o.png'></li><li><span></span></li></ul></div>"
        )
        assert extract_offers(div) == []

    def test_other_container(self):
        assert extract_offers(first_div("<div>Highlights<li><span>x</span></li></div>")) is None


class TestSpecifications:
    HTML = (
        "<div><div>Specifications</div>"
        "<div><div>General</div><table>"
        "<tr><td>Brand</td><td>Acme</td></tr>"
        "<tr><td>single cell</td></tr>"
        "<tr><td>Model</td><td><ul><li>KT-15</li></ul></td></tr>"
        "</table></div>"
        "<div><table><tr><td>Orphan</td><td>row</td></tr></table></div>"
        "<div><div><b>Bold heading</b></div><table><tr><td>x</td><td>y</td></tr></table></div>"
        "</div>"
    )

    def test_groups_and_rows(self):
        groups = extract_specifications(first_div(self.HTML))
        assert len(groups) == 1
        general = groups[0]
        assert general.category == "General"
        assert [(s.name, s.value) for s in general.specifications] == [
            ("Brand", "Acme"),
            ("Model", "KT-15"),
        ]

    def test_other_container(self):
        assert extract_specifications(first_div("<div>Highlights<table></table></div>")) is None


class TestRatingAndBadge:
    def test_rating_next_to_star(self):
        div = first_div(f'<div>4.4<img src="{STAR_ICON_SRC}"></div>')
        assert extract_rating(div) == pytest.approx(4.4)

    def test_other_icon_is_ignored(self):
        div = first_div('<div>4.4<img src="https://example.com/star.png"></div>')
        assert extract_rating(div) is None

    def test_only_first_image_is_checked(self):
        div = first_div(f'<div>4.4<img src="a.png"><img src="{STAR_ICON_SRC}"></div>')
        assert extract_rating(div) is None

    def test_f_assured_badge(self):
        assert has_f_assured_badge(first_div(f'<div><span><img src="{FA_ICON}"></span></div>'))
        assert not has_f_assured_badge(first_div('<div><img src="other.png"></div>'))


class TestPricePair:
    def test_current_then_original(self):
        div = first_div(
            "<div><div><div>₹100</div><div>₹150</div><div><span>33% off</span></div></div></div>"
        )
        # The wrapper block holds both figures and is skipped as compound
        assert scan_price_container(div) == (100, 150)
        assert scan_price_container(div.select_one("div")) == (100, 150)

    def test_compound_block_is_skipped(self):
        div = first_div("<div>₹1,499<div>₹1,499₹2,999</div><div>₹1,499</div><div>₹2,999</div></div>")
        assert scan_price_container(div) == (1499, 2999)

    def test_unparsable_original_defaults_to_current(self):
        div = first_div("<div>₹499<div>₹499</div><div>₹ N/A</div></div>")
        assert scan_price_container(div) == (499, 499)

    def test_container_must_start_with_symbol(self):
        assert scan_price_container(first_div("<div>Price<div>₹1</div></div>")) is None

    def test_pair_across_containers(self):
        doc = parse_document(
            "<div id='a'>Rating 4.1</div>"
            "<div id='b'>₹500<div>₹500</div></div>"
            "<div id='c'>₹800<div>₹800</div></div>"
        )
        assert extract_price_pair(doc.select("div")) == (500, 800)

    def test_no_price(self):
        assert extract_price_pair(parse_document("<div>free</div>").select("div")) == (None, None)
