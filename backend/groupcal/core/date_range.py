"""Inclusive calendar-day range used for fetch boundaries and aggregation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from groupcal.core.errors import InvalidRangeError


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date  # inclusive

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidRangeError(f"Date range ends before it starts: {self.start} > {self.end}")

    @classmethod
    def parse(cls, start: str, end: str) -> "DateRange":
        """Build from YYYY-MM-DD strings. Raises InvalidRangeError on bad input."""
        try:
            start_day = date.fromisoformat(start)
            end_day = date.fromisoformat(end)
        except (TypeError, ValueError) as e:
            raise InvalidRangeError(f"Invalid date range {start!r}..{end!r}") from e
        return cls(start_day, end_day)

    def days(self) -> list[date]:
        return list(self)

    def __iter__(self) -> Iterator[date]:
        day = self.start
        while day <= self.end:
            yield day
            day += timedelta(days=1)

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end

    def widen(self, days: int = 1) -> "DateRange":
        """Range padded on both sides; used to fetch canonical days that spill across local midnight."""
        return DateRange(self.start - timedelta(days=days), self.end + timedelta(days=days))

    @property
    def key(self) -> str:
        """Stable string key, e.g. 2024-06-10..2024-06-16."""
        return f"{self.start.isoformat()}..{self.end.isoformat()}"
