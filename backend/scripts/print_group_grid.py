#!/usr/bin/env python3
"""
Print the aggregated availability grid for a campaign, as a viewer in a given timezone sees it.
Run: cd backend && python scripts/print_group_grid.py CAMPAIGN_ID [--anchor 2024-06-10]
     [--zoom compact|normal|wide] [--fine] [--tz Europe/London] [--slot-date]
"""
import argparse
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from groupcal.core.calendar_config import get_calendar_config
from groupcal.core.constants import GRANULARITY_FINE, GRANULARITY_HOUR, ZOOM_NORMAL, ZOOM_STEP_DAYS
from groupcal.db.session import SessionLocal
from groupcal.services.aggregation import aggregate
from groupcal.services.availability import get_all_availability
from groupcal.services.calendar.view_model import build_view
from groupcal.services.campaign_service import get_roster
from groupcal.services.sessions.service import list_session_infos
from groupcal.services.time_format import format_time
from groupcal.services.timezone import ViewerTimezoneContext

# One character per tier so a two-week grid fits in a terminal
_TIER_MARKS = {
    "empty": " ",
    "none": ".",
    "low": "-",
    "low-mid": "=",
    "mid-high": "+",
    "high": "#",
    "full": "@",
    "scheduled": "S",
}


def main():
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("campaign_id")
    parser.add_argument("--anchor", type=date.fromisoformat, default=date.today())
    parser.add_argument("--zoom", choices=sorted(ZOOM_STEP_DAYS), default=ZOOM_NORMAL)
    parser.add_argument("--fine", action="store_true", help="half-hour rows")
    parser.add_argument("--tz", default=None, help="viewer IANA timezone (default: this machine's)")
    parser.add_argument("--slot-date", action="store_true", help="convert hours with each slot's own date")
    args = parser.parse_args()

    config = get_calendar_config()
    if args.slot_date:
        config = replace(config, convert_with_slot_date=True)
    tz = ViewerTimezoneContext.resolve(args.tz, config=config)
    view = build_view(args.anchor, args.zoom, GRANULARITY_FINE if args.fine else GRANULARITY_HOUR, config=config)

    db = SessionLocal()
    try:
        roster = get_roster(db, args.campaign_id)
        fetch_range = view.date_range.widen(1)
        grid = aggregate(
            view.date_range,
            view.hour_grid,
            get_all_availability(db, args.campaign_id, fetch_range),
            list_session_infos(db, args.campaign_id, fetch_range),
            tz=tz,
            roster=roster,
        )
    finally:
        db.close()

    print(f"Campaign {args.campaign_id}: {len(roster)} members, viewer tz {tz.name} (canonical={tz.is_canonical})")
    print(" " * 9 + "".join(d.strftime("%a%d").ljust(6) for d in view.date_range))
    for row in grid.rows():
        cells = "".join(f"{_TIER_MARKS[s.tier]}{s.count}".ljust(6) for s in row)
        print(f"{format_time(row[0].hour):>8} {cells}")


if __name__ == "__main__":
    main()
