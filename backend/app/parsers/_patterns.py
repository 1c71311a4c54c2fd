"""Named-group pattern matching shared by the Pick-n-Pull parsers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterator, Optional


@dataclass(frozen=True)
class MatchRecord:
    groups: Dict[str, str]
    start: int
    end: int

    def __getitem__(self, name: str) -> str:
        return self.groups[name]


@dataclass(frozen=True)
class PatternMatcher:
    """Match a pattern's named groups against text.

    Matches are scanned left to right and never overlap. Groups that did not
    participate in a match come back as empty strings.
    """

    name: str
    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, name: str, regex: str, flags: int = 0) -> "PatternMatcher":
        return cls(name=name, pattern=re.compile(regex, flags))

    def _record(self, match: re.Match[str]) -> MatchRecord:
        groups = {key: value or "" for key, value in match.groupdict().items()}
        return MatchRecord(groups=groups, start=match.start(), end=match.end())

    def finditer(self, text: str) -> Iterator[MatchRecord]:
        for match in self.pattern.finditer(text):
            yield self._record(match)

    def search(self, text: str) -> Optional[MatchRecord]:
        match = self.pattern.search(text)
        if not match:
            return None
        return self._record(match)


TABLE_ROW = PatternMatcher.compile(
    "table_row",
    r"\|\s*(?P<photo>[^|]+)\s*"
    r"\|\s*(?P<year>\d{4})\s*"
    r"\|\s*(?P<make>[^|]+)\s*"
    r"\|\s*(?P<model>[^|]+)\s*"
    r"\|\s*(?P<row>[^|]+)\s*"
    r"\|\s*(?P<set_date>[^|]+)\s*\|",
)

# e.g. "2005 Subaru Impreza Wagon Row 132 Set: 04/02/2025"
FREE_TEXT_VEHICLE = PatternMatcher.compile(
    "free_text_vehicle",
    r"(?P<year>\d{4})\s+(?P<make>[A-Za-z]+)\s+(?P<model>[A-Za-z\s]+)\s+"
    r"Row\s+(?P<row>\d+)\s+Set:\s*(?P<set_date>[0-9/]+)",
)

FACILITY_NAME = PatternMatcher.compile("facility_name", r"Pick-n-Pull - (?P<facility>[^\]]+)")

STREET_ADDRESS = PatternMatcher.compile(
    "street_address",
    r"(?P<address>\d+\s+[^•]+)•\s*(?P<city_state>[^\[]+)",
)


__all__ = [
    "MatchRecord",
    "PatternMatcher",
    "TABLE_ROW",
    "FREE_TEXT_VEHICLE",
    "FACILITY_NAME",
    "STREET_ADDRESS",
]
