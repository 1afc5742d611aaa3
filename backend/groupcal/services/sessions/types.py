"""Read-only view of a scheduled session as the calendar engine sees it."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SessionInfo:
    id: str
    campaign_id: str
    title: str
    date: str  # YYYY-MM-DD, canonical timezone
    start_time: float  # canonical hour, inclusive
    end_time: float  # canonical hour, exclusive
    notes: str = ""

    def covers(self, day_str: str, canonical_hour: float) -> bool:
        return self.date == day_str and self.start_time <= canonical_hour < self.end_time

    @classmethod
    def from_row(cls, row: Any) -> "SessionInfo":
        return cls(
            id=str(row.id),
            campaign_id=row.campaign_id,
            title=row.title,
            date=row.date,
            start_time=float(row.start_time),
            end_time=float(row.end_time),
            notes=row.notes or "",
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionInfo":
        return cls(
            id=str(data.get("id", "")),
            campaign_id=str(data.get("campaign_id", "")),
            title=str(data.get("title", "")),
            date=str(data.get("date", ""))[:10],
            start_time=float(data["start_time"]),
            end_time=float(data["end_time"]),
            notes=str(data.get("notes") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "campaign_id": self.campaign_id,
            "title": self.title,
            "date": self.date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "notes": self.notes,
        }
