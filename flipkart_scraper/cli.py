"""Command-line interface for the scraper."""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Union

import requests  # type: ignore[import-untyped]

from flipkart_scraper.config import DEFAULT_MAX_WORKERS
from flipkart_scraper.exceptions import ContentSignatureError, URLValidationError
from flipkart_scraper.fetcher import Fetcher
from flipkart_scraper.logging_config import setup_logging
from flipkart_scraper.models import ProductRecord
from flipkart_scraper.product import fetch_product, fetch_products
from flipkart_scraper.search import search_products

__all__ = ["main", "parse_args", "EXIT_OK", "EXIT_INVALID", "EXIT_CONTENT", "EXIT_TRANSPORT"]

EXIT_OK = 0
EXIT_INVALID = 2
EXIT_CONTENT = 3
EXIT_TRANSPORT = 4


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="flipkart-scraper",
        description="Scrape Flipkart product pages and search results into JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Details of one product
  python -m flipkart_scraper.cli product https://www.flipkart.com/some-product/p/itm123

  # Several products fetched in parallel, written to a file
  python -m flipkart_scraper.cli --output data/products.json product URL1 URL2 URL3

  # Search results for a query
  python -m flipkart_scraper.cli search "laptop charger hp 65W"

  # Search and resolve every result into full product details
  python -m flipkart_scraper.cli search "usb c cable" --resolve
        """,
    )

    parser.add_argument(
        "--output",
        metavar="PATH",
        help="Write JSON to this file instead of stdout",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging on the console",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Don't write the JSONL log file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    product_parser = subparsers.add_parser("product", help="Fetch product details")
    product_parser.add_argument("urls", nargs="+", metavar="URL", help="Product page URL(s)")
    product_parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Parallel fetches when several URLs are given (default: {DEFAULT_MAX_WORKERS})",
    )

    search_parser = subparsers.add_parser("search", help="Search for products")
    search_parser.add_argument("query", help="Free-text search query")
    search_parser.add_argument(
        "--resolve",
        action="store_true",
        help="Also fetch full details of every result",
    )
    search_parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Parallel fetches for --resolve (default: {DEFAULT_MAX_WORKERS})",
    )

    return parser.parse_args(argv)


def _write_output(payload: Any, output: Optional[str]) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        print(f"Wrote {output}", file=sys.stderr)
    else:
        print(text)


def run(args: argparse.Namespace, fetcher: Optional[Fetcher] = None) -> Any:
    """Execute the parsed command and return its JSON payload."""
    if args.command == "product":
        if len(args.urls) == 1:
            return fetch_product(args.urls[0], fetcher=fetcher).to_dict()
        records = fetch_products(args.urls, fetcher=fetcher, max_workers=args.workers)
        return [record.to_dict() for record in records]

    result_set = search_products(args.query, fetcher=fetcher)
    payload = result_set.to_dict()
    if args.resolve:
        # Failed results are reported in their slot
        links = [entry.product_link for entry in result_set]
        outcomes = fetch_products(
            links, fetcher=fetcher, max_workers=args.workers, return_exceptions=True
        )
        payload["products"] = [
            _resolved_payload(link, outcome) for link, outcome in zip(links, outcomes)
        ]
    return payload


def _resolved_payload(link: str, outcome: Union[ProductRecord, Exception]) -> Dict[str, Any]:
    if isinstance(outcome, Exception):
        return {"product_link": link, "error": f"{type(outcome).__name__}: {outcome}"}
    return outcome.to_dict()


def main(argv: Optional[List[str]] = None, fetcher: Optional[Fetcher] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_to_file=not args.no_log_file,
    )

    try:
        payload = run(args, fetcher=fetcher)
    except URLValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID
    except ContentSignatureError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONTENT
    except requests.exceptions.RequestException as e:
        print(f"Error: request failed: {e}", file=sys.stderr)
        return EXIT_TRANSPORT

    _write_output(payload, args.output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
