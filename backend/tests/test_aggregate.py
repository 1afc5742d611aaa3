"""Aggregation: counts, totals, tiers and session annotation."""

from datetime import date

import pytest

from groupcal.core.constants import TIER_ORDER
from groupcal.core.date_range import DateRange
from groupcal.services.aggregation import aggregate, tier_for, tier_rank
from groupcal.services.sessions import SessionInfo
from groupcal.services.timezone import ViewerTimezone, ViewerTimezoneContext

DAY = date(2024, 6, 10)
ONE_DAY = DateRange(DAY, DAY)
ROSTER = ["alice", "bob", "carol"]


@pytest.fixture
def eastern():
    return ViewerTimezoneContext.resolve("America/New_York", reference_date=DAY)


@pytest.fixture
def halifax():
    # One hour ahead of New York all year
    return ViewerTimezoneContext(
        ViewerTimezone(name="America/Halifax", is_canonical=False),
        canonical_timezone="America/New_York",
        reference_date=DAY,
    )


def _session(start: float, end: float, day: str = "2024-06-10") -> SessionInfo:
    return SessionInfo(id="s1", campaign_id="c1", title="Session 12", date=day, start_time=start, end_time=end)


def test_basic_aggregation(eastern):
    availability = {
        "alice": {"2024-06-10-14": True},
        "bob": {"2024-06-10-14": True},
        "carol": {},
    }
    grid = aggregate(ONE_DAY, [14.0], availability, [], tz=eastern, roster=ROSTER)
    cell = grid.cell(DAY, 14.0)
    assert (cell.count, cell.total) == (2, 3)
    assert cell.tier == "mid-high"
    assert cell.available_users == ["alice", "bob"]
    assert cell.session is None


def test_total_counts_members_without_records(eastern):
    grid = aggregate(ONE_DAY, [14.0], {"alice": {"2024-06-10-14": True}}, [], tz=eastern, roster=ROSTER + ["dave"])
    cell = grid.cell(DAY, 14.0)
    assert (cell.count, cell.total) == (1, 4)
    assert cell.tier == "low-mid"


def test_users_outside_roster_are_ignored(eastern):
    grid = aggregate(ONE_DAY, [14.0], {"mallory": {"2024-06-10-14": True}}, [], tz=eastern, roster=["alice"])
    cell = grid.cell(DAY, 14.0)
    assert (cell.count, cell.total) == (0, 1)
    assert cell.tier == "none"


def test_without_roster_counts_users_in_data(eastern):
    availability = {"alice": {"2024-06-10-14": True}, "bob": {}}
    cell = aggregate(ONE_DAY, [14.0], availability, [], tz=eastern).cell(DAY, 14.0)
    assert (cell.count, cell.total) == (1, 2)


def test_empty_roster_is_empty_tier(eastern):
    cell = aggregate(ONE_DAY, [14.0], {}, [], tz=eastern, roster=[]).cell(DAY, 14.0)
    assert (cell.count, cell.total, cell.tier) == (0, 0, "empty")


def test_malformed_values_are_coerced(eastern):
    availability = {
        "alice": {"2024-06-10-14": "yes"},
        "bob": {"2024-06-10-14": None},
        "carol": {"2024-06-10-14": 1},
    }
    cell = aggregate(ONE_DAY, [14.0], availability, [], tz=eastern, roster=ROSTER).cell(DAY, 14.0)
    assert cell.count == 2


def test_session_forces_scheduled_tier(eastern):
    grid = aggregate(ONE_DAY, [13.0, 14.0, 15.0], {}, [_session(13, 15)], tz=eastern, roster=ROSTER)
    assert grid.cell(DAY, 14.0).session is not None
    assert grid.cell(DAY, 14.0).tier == "scheduled"
    assert grid.cell(DAY, 14.0).count == 0
    assert grid.cell(DAY, 13.0).tier == "scheduled"
    # end is exclusive
    assert grid.cell(DAY, 15.0).session is None
    assert grid.cell(DAY, 15.0).tier == "none"


def test_session_on_other_day_does_not_match(eastern):
    grid = aggregate(ONE_DAY, [14.0], {}, [_session(13, 15, day="2024-06-11")], tz=eastern, roster=ROSTER)
    assert grid.cell(DAY, 14.0).session is None


def test_session_overlap_uses_viewer_offset(halifax):
    grid = aggregate(ONE_DAY, [9.0, 10.0, 11.0], {}, [_session(9, 10)], tz=halifax, roster=ROSTER)
    assert grid.cell(DAY, 10.0).session is not None
    assert grid.cell(DAY, 9.0).session is None
    assert grid.cell(DAY, 11.0).session is None


def test_viewer_reads_canonical_keys_through_offset(halifax):
    availability = {"alice": {"2024-06-10-13": True}}
    grid = aggregate(ONE_DAY, [13.0, 14.0], availability, [], tz=halifax, roster=ROSTER, viewer="alice")
    cell = grid.cell(DAY, 14.0)
    assert cell.key == "2024-06-10-13"
    assert cell.canonical_hour == 13
    assert cell.count == 1
    assert cell.is_available is True
    assert grid.cell(DAY, 13.0).is_available is False


def test_viewer_slots_override_stored_map(eastern):
    availability = {"alice": {"2024-06-10-14": True}}
    grid = aggregate(
        ONE_DAY, [14.0], availability, [], tz=eastern, roster=ROSTER, viewer="alice", viewer_slots={}
    )
    assert grid.cell(DAY, 14.0).is_available is False


def test_counts_stay_within_total_over_a_week(eastern):
    week = DateRange(date(2024, 6, 10), date(2024, 6, 16))
    availability = {
        "alice": {f"{d.isoformat()}-{h}": True for d in week for h in range(8, 23, 2)},
        "bob": {f"{d.isoformat()}-{h}": True for d in week for h in range(8, 23, 3)},
        "zed": {f"{d.isoformat()}-{h}": True for d in week for h in range(8, 23)},
    }
    grid = aggregate(week, [float(h) for h in range(8, 23)], availability, [], tz=eastern, roster=ROSTER)
    assert len(grid.slots) == 7 * 15
    for slot in grid.slots:
        assert 0 <= slot.count <= slot.total == 3
    assert len(grid.rows()) == 15
    assert len(grid.rows()[0]) == 7


@pytest.mark.parametrize(
    "count,total,expected",
    [
        (0, 0, "empty"),
        (0, 4, "none"),
        (1, 5, "low"),
        (1, 4, "low-mid"),
        (2, 4, "mid-high"),
        (2, 3, "mid-high"),
        (3, 4, "high"),
        (9, 10, "high"),
        (4, 4, "full"),
    ],
)
def test_tier_thresholds(count, total, expected):
    assert tier_for(count, total) == expected


def test_session_tier_ignores_ratio():
    assert tier_for(0, 5, has_session=True) == "scheduled"
    assert tier_for(5, 5, has_session=True) == "scheduled"
    assert tier_for(0, 0, has_session=True) == "scheduled"


@pytest.mark.parametrize("total", range(1, 13))
def test_tier_is_monotonic_in_count(total):
    ranks = [tier_rank(tier_for(count, total)) for count in range(total + 1)]
    assert ranks == sorted(ranks)
    assert tier_rank("scheduled") == len(TIER_ORDER) - 1
