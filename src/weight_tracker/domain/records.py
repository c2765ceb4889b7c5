"""Domain models for weight records."""

import math
from dataclasses import dataclass, field
from datetime import date

EPOCH = date(1970, 1, 1)


@dataclass(frozen=True)
class CalendarDate:
    """Calendar date keyed by its submitted text.

    Equality uses the raw text. Ordering uses the parsed ISO date, with
    unparseable text ordered as the Unix epoch and ties broken by the raw text,
    so any two values compare deterministically.
    """

    raw: str
    parsed: date | None = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parsed", _parse_iso_date(self.raw))

    @property
    def is_valid(self) -> bool:
        """Return True when the raw text is an ISO calendar date."""
        return self.parsed is not None

    @property
    def sort_key(self) -> tuple[int, str]:
        """Return the total-order key for this date."""
        day = self.parsed or EPOCH
        return day.toordinal(), self.raw

    def month_day(self) -> str:
        """Return a short ``month/day`` label without the year."""
        if self.parsed is None:
            return self.raw
        return f"{self.parsed.month}/{self.parsed.day}"

    def __lt__(self, other: "CalendarDate") -> bool:
        return self.sort_key < other.sort_key

    def __le__(self, other: "CalendarDate") -> bool:
        return self.sort_key <= other.sort_key

    def __gt__(self, other: "CalendarDate") -> bool:
        return self.sort_key > other.sort_key

    def __ge__(self, other: "CalendarDate") -> bool:
        return self.sort_key >= other.sort_key

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class WeightRecord:
    """One dated weight observation with an optional photo."""

    date: CalendarDate
    weight: str
    image_data_url: str | None = None

    @property
    def has_photo(self) -> bool:
        """Return True when a photo is attached."""
        return bool(self.image_data_url)

    def weight_value(self) -> float | None:
        """Return the weight as a finite non-negative number, if it parses."""
        return parse_weight(self.weight)


def parse_weight(raw: str) -> float | None:
    """Parse weight text, returning None for non-numeric or invalid values."""
    try:
        value = float(raw.strip())
    except (AttributeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def _parse_iso_date(raw: str) -> date | None:
    try:
        return date.fromisoformat(raw.strip())
    except (AttributeError, ValueError):
        return None
