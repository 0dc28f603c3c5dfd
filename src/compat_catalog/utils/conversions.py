"""Lenient conversions from command-file text to typed values.

All helpers return ``0`` or ``None`` on bad input instead of raising, so the
caller decides whether a missing value is an error.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import TypeVar

from compat_catalog.constants import DATE_FORMAT

E = TypeVar("E", bound=Enum)

_VERSION_SPLIT_RE = re.compile(r"[.\-f]")


def parse_id(text: str) -> int:
    """Parse a numeric id; anything that is not a positive integer becomes 0."""
    text = text.strip()
    if not text.isdigit():
        return 0
    return int(text)


def parse_date(text: str) -> date | None:
    try:
        return datetime.strptime(text.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def format_date(value: date | None) -> str:
    return value.strftime(DATE_FORMAT) if value else ""


def months_before(day: date, months: int) -> date:
    """The same day ``months`` calendar months earlier, clamped to month end."""
    total = day.year * 12 + (day.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _enum_key(text: str) -> str:
    return text.strip().replace("_", "").replace(" ", "").lower()


def parse_enum(enum_type: type[E], text: str) -> E | None:
    """Look up an enum member by name, ignoring case and underscores.

    ``UnlistedInWorkshop``, ``unlistedinworkshop`` and ``unlisted_in_workshop``
    all resolve to the same member.
    """
    key = _enum_key(text)
    if not key:
        return None
    for member in enum_type:
        if _enum_key(member.name) == key:
            return member
    return None


@dataclass(frozen=True, slots=True, order=True)
class GameVersion:
    """A game build number such as ``1.13.3-f9``."""

    major: int
    minor: int
    build: int = 0
    revision: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}-f{self.revision}"


def parse_game_version(text: str) -> GameVersion | None:
    """Parse ``1.13.3-f9`` or ``1.13.3.9`` style versions, or return None."""
    parts = [p for p in _VERSION_SPLIT_RE.split(text.strip()) if p]
    if not 2 <= len(parts) <= 4 or not all(p.isdigit() for p in parts):
        return None
    numbers = [int(p) for p in parts] + [0] * (4 - len(parts))
    return GameVersion(*numbers)
