"""
Sparse availability map: "YYYY-MM-DD-<hour>" -> bool with an implicit False default.

Hour keys encode integer or half-integer canonical hours ("14", "14.5"). Values read from
the store go through coerce_available, so a malformed stored value never raises.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping

_TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "on", "t"})


def hour_key(hour: float) -> str:
    """14 -> "14", 14.0 -> "14", 14.5 -> "14.5"."""
    return f"{float(hour):g}"


def slot_key(day: date, hour: float) -> str:
    return f"{day.isoformat()}-{hour_key(hour)}"


def parse_slot_key(key: str) -> tuple[date, float]:
    """Inverse of slot_key. Raises ValueError for keys not shaped like YYYY-MM-DD-H."""
    day_str, _, hour_str = key.rpartition("-")
    return date.fromisoformat(day_str), float(hour_str)


def coerce_available(value: Any) -> bool:
    """
    Truthiness rule for stored slot values: booleans as-is, numbers non-zero,
    strings in _TRUE_STRINGS (case-insensitive), everything else False.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


class SlotMap(dict):
    """dict of slot key -> bool where an absent key reads as False (unavailable)."""

    def __missing__(self, key: str) -> bool:
        return False

    def get(self, key: str, default: bool = False) -> bool:  # type: ignore[override]
        return super().get(key, default)

    def is_available(self, day: date, hour: float) -> bool:
        return self[slot_key(day, hour)]

    def set(self, day: date, hour: float, value: bool) -> None:
        self[slot_key(day, hour)] = bool(value)

    def copy(self) -> "SlotMap":
        return SlotMap(self)

    def true_keys(self) -> set[str]:
        return {k for k, v in self.items() if v}

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None) -> "SlotMap":
        """Build from an untrusted mapping (store rows, JSON), coercing every value."""
        out = cls()
        for key, value in (raw or {}).items():
            out[str(key)] = coerce_available(value)
        return out

    @classmethod
    def from_rows(cls, rows: Iterable[tuple[date, str, Any]]) -> "SlotMap":
        """Build from (day, hour_key, value) rows."""
        out = cls()
        for day, key, value in rows:
            out[f"{day.isoformat()}-{key}"] = coerce_available(value)
        return out


def all_users_from_raw(raw: Mapping[str, Mapping[str, Any]] | None) -> dict[str, SlotMap]:
    return {str(username): SlotMap.from_raw(slots) for username, slots in (raw or {}).items()}
