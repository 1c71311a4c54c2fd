"""Best-effort location and set-date recovery for Pick-n-Pull pages."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from ._patterns import FACILITY_NAME, STREET_ADDRESS

SET_DATE_FORMATS: Sequence[str] = ("%m/%d/%Y", "%Y-%m-%d")


def extract_location(text: str) -> Optional[str]:
    """Return the yard's facility name, else its street address, else None."""
    facility = FACILITY_NAME.search(text)
    if facility:
        return facility["facility"]

    address = STREET_ADDRESS.search(text)
    if address:
        return f"{address['address'].strip()}, {address['city_state'].strip()}"

    return None


def parse_set_date(value: str) -> Optional[datetime]:
    for fmt in SET_DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)
    return None


__all__ = ["extract_location", "parse_set_date", "SET_DATE_FORMATS"]
