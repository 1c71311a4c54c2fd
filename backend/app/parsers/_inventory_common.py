"""Record types shared by the Pick-n-Pull inventory parsers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Optional, TypeVar

from .enrichment import parse_set_date

UNKNOWN_LOCATION = "Unknown Location"

T = TypeVar("T")


@dataclass(frozen=True)
class InventoryRecord:
    id: str
    make: str
    model: str
    year: Optional[int]
    location: Optional[str]
    availability: bool
    added_date: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "make": self.make,
            "model": self.model,
            "year": self.year,
            "location": self.location,
            "availability": self.availability,
            "added_date": format_utc(self.added_date),
        }


def format_utc(value: datetime) -> str:
    """RFC 3339 timestamp with a ``Z`` suffix, e.g. ``2025-04-02T00:00:00Z``."""
    text = value.astimezone(timezone.utc).isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


@dataclass(frozen=True)
class FieldResult(Generic[T]):
    """Outcome of parsing a single field; ``value`` is None when ``valid`` is False."""

    value: Optional[T]
    valid: bool

    @classmethod
    def of(cls, value: Optional[T]) -> "FieldResult[T]":
        return cls(value=value, valid=value is not None)


def _parse_year(token: str) -> FieldResult[int]:
    # The row patterns accept any Unicode digit; only ASCII years are numeric.
    if len(token) != 4 or not (token.isascii() and token.isdigit()):
        return FieldResult(value=None, valid=False)
    return FieldResult(value=int(token), valid=True)


@dataclass(frozen=True)
class ParsedCandidate:
    record_id: str
    year_token: str
    make: str
    model: str
    row: str
    set_date_token: str
    year: FieldResult[int]
    location: FieldResult[str]
    added_date: FieldResult[datetime]

    @classmethod
    def build(
        cls,
        *,
        record_id: str,
        year_token: str,
        make: str,
        model: str,
        row: str,
        set_date_token: str,
        location: Optional[str],
    ) -> "ParsedCandidate":
        return cls(
            record_id=record_id,
            year_token=year_token,
            make=make,
            model=model,
            row=row,
            set_date_token=set_date_token,
            year=_parse_year(year_token),
            location=FieldResult.of(location),
            added_date=FieldResult.of(parse_set_date(set_date_token)),
        )

    def to_record(self) -> InventoryRecord:
        facility = self.location.value if self.location.valid else UNKNOWN_LOCATION
        added_date = self.added_date.value if self.added_date.valid else None
        return InventoryRecord(
            id=self.record_id,
            make=self.make,
            model=self.model,
            year=self.year.value,
            location=f"Row {self.row}, {facility}",
            availability=True,
            # A parse-time stand-in when the page gives no usable set date.
            added_date=added_date or datetime.now(timezone.utc),
        )


def table_record_id(year: str, make: str, model: str, row: str) -> str:
    return "_".join(
        (
            year,
            make.lower().replace(" ", "_"),
            model.lower().replace(" ", "_"),
            row.replace(" ", "_"),
        )
    )


def free_text_record_id(year: str, make: str, model: str, row: str) -> str:
    return "_".join((year, make.lower(), model.lower().replace(" ", "_"), row))


__all__ = [
    "InventoryRecord",
    "FieldResult",
    "ParsedCandidate",
    "UNKNOWN_LOCATION",
    "table_record_id",
    "free_text_record_id",
    "format_utc",
]
