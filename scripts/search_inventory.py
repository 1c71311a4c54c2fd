#!/usr/bin/env python3
"""Search Pick-n-Pull inventory from the command line.

Either scrape a live search (``--make``/``--model``/``--zip``) or parse a
markdown page saved earlier (``--file``).
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from backend.app.core.settings import settings
from backend.app.parsers.pick_n_pull import parse_inventory
from backend.app.parsers.url_builder import CatalogLookupError, PicknPullCatalog
from backend.app.services.firecrawl_client import FirecrawlClient, FirecrawlError

logger = logging.getLogger("search_inventory")


async def scrape(url: str) -> str:
    client = FirecrawlClient()
    try:
        result = await client.fetch(url)
    finally:
        await client.aclose()
    logger.info("Firecrawl status: %s", result.status_code)
    return result.markdown or ""


def main():
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--make", type=str, default="Subaru")
    ap.add_argument("--model", type=str, default="Impreza Wagon")
    ap.add_argument("--zip", type=str, default="84104", help="ZIP code to search around")
    ap.add_argument("--distance", type=int, default=settings.default_distance, help="Search radius in miles")
    ap.add_argument("--year-min", type=int, default=2000)
    ap.add_argument("--year-max", type=int, default=2006)
    ap.add_argument("--file", type=str, help="Parse a saved markdown page instead of scraping")
    args = ap.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    if args.file:
        source = Path(args.file)
        markdown = source.read_text(encoding="utf-8")
        url = source.as_uri() if source.is_absolute() else str(source)
    else:
        try:
            url = PicknPullCatalog.from_yaml().search_url(
                args.make, args.model, args.zip, args.distance, (args.year_min, args.year_max)
            )
        except CatalogLookupError as exc:
            print(exc)
            sys.exit(1)
        print(f"Searching URL: {url}")
        try:
            markdown = asyncio.run(scrape(url))
        except FirecrawlError as exc:
            print(f"Failed to crawl webpage: {exc}")
            sys.exit(1)

    items = parse_inventory(markdown, url)
    print(f"Found {len(items)} vehicles:")
    for item in items:
        print(f"{item.id} {item.make} {item.model} - Location: {item.location or 'Unknown'}")


if __name__ == "__main__":
    main()
