"""Pick-n-Pull inventory page parser.

Firecrawl returns the vehicle-search results page as markdown. The results
live in a pipe table under a ``## Matching Vehicles`` header::

    | Photo | Year | Make | Model | Row | Set Date |
    | --- | --- | --- | --- | --- | --- |
    | ![](...) | 2005 | Subaru | Impreza Wagon | 132 | 04/02/2025 |

When no table rows can be read the whole page is scanned for inline entries
such as ``2005 Subaru Impreza Wagon Row 132 Set: 04/02/2025`` instead.
"""

from __future__ import annotations

import logging
from typing import List

from ._inventory_common import (
    InventoryRecord,
    ParsedCandidate,
    free_text_record_id,
    table_record_id,
)
from ._patterns import FREE_TEXT_VEHICLE, TABLE_ROW
from .enrichment import extract_location

logger = logging.getLogger(__name__)

NO_VEHICLES_MARKER = "### No Vehicles Found"
MATCHING_VEHICLES_MARKER = "## Matching Vehicles"
HEADER_YEAR_CELL = "Year"


def extract_table_candidates(section: str) -> List[ParsedCandidate]:
    """Read candidate rows from the text of a matching-vehicles section."""
    candidates: List[ParsedCandidate] = []
    for match in TABLE_ROW.finditer(section):
        if match["year"] == HEADER_YEAR_CELL:
            continue

        year = match["year"].strip()
        make = match["make"].strip()
        model = match["model"].strip()
        row = match["row"].strip()
        set_date = match["set_date"].strip()

        if not year or not make or not model:
            continue

        candidates.append(
            ParsedCandidate.build(
                record_id=table_record_id(year, make, model, row),
                year_token=year,
                make=make,
                model=model,
                row=row,
                set_date_token=set_date,
                location=extract_location(section),
            )
        )
    return candidates


def extract_free_text_candidates(text: str) -> List[ParsedCandidate]:
    # Every entry shares one page-wide location guess, so pages listing
    # several yards attribute them all to the first one found.
    location = extract_location(text)
    candidates: List[ParsedCandidate] = []
    for match in FREE_TEXT_VEHICLE.finditer(text):
        year = match["year"]
        make = match["make"]
        model = match["model"].strip()
        row = match["row"]
        candidates.append(
            ParsedCandidate.build(
                record_id=free_text_record_id(year, make, model, row),
                year_token=year,
                make=make,
                model=model,
                row=row,
                set_date_token=match["set_date"],
                location=location,
            )
        )
    return candidates


def parse_alternative_format(markdown: str, source_url: str) -> List[InventoryRecord]:
    """Parse inline vehicle entries anywhere in the page."""
    records = [candidate.to_record() for candidate in extract_free_text_candidates(markdown)]
    logger.debug("Free-text scan of %s found %d vehicles", source_url, len(records))
    return records


def parse_inventory(markdown: str, source_url: str) -> List[InventoryRecord]:
    """Parse a Pick-n-Pull vehicle-search page into inventory records."""
    if NO_VEHICLES_MARKER in markdown:
        logger.info("No vehicles found in inventory for %s", source_url)
        return []

    records: List[InventoryRecord] = []
    section_start = markdown.find(MATCHING_VEHICLES_MARKER)
    if section_start != -1:
        section = markdown[section_start:]
        records = [candidate.to_record() for candidate in extract_table_candidates(section)]

    if not records:
        logger.debug("No inventory table rows in %s; falling back to free-text scan", source_url)
        return parse_alternative_format(markdown, source_url)

    logger.debug("Parsed %d vehicles from inventory table at %s", len(records), source_url)
    return records


__all__ = [
    "parse_inventory",
    "parse_alternative_format",
    "extract_table_candidates",
    "extract_free_text_candidates",
    "NO_VEHICLES_MARKER",
    "MATCHING_VEHICLES_MARKER",
]
