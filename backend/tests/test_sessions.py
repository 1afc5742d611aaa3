"""Scheduled sessions: validation, recurring series, roll-forward on delete, labels."""

from datetime import date

import pytest

from groupcal.core.date_range import DateRange
from groupcal.core.errors import InvalidSessionError, NotFoundError, PermissionDeniedError
from groupcal.services.sessions.service import (
    create_sessions,
    delete_session,
    list_session_infos,
    list_sessions,
    session_to_dict,
    update_session,
)
from groupcal.services.time_format import format_time, format_time_range


def _create(db, **overrides):
    fields = dict(
        campaign_id="c1",
        title="Session 1",
        date_str="2024-06-10",
        start_time=19,
        end_time=22.5,
        created_by="gm",
    )
    fields.update(overrides)
    return create_sessions(db, **fields)


def test_create_single(db_session):
    rows, group_id = _create(db_session)
    assert group_id is None
    assert len(rows) == 1
    assert rows[0].id is not None
    assert rows[0].is_recurring is False


@pytest.mark.parametrize(
    "overrides",
    [
        {"start_time": 20, "end_time": 20},
        {"start_time": 21, "end_time": 20},
        {"title": "  "},
        {"date_str": ""},
        {"date_str": "June 10"},
        {"start_time": -1},
        {"end_time": 25},
        {"start_time": 19.25},
    ],
)
def test_invalid_sessions_rejected(db_session, overrides):
    with pytest.raises(InvalidSessionError):
        _create(db_session, **overrides)


def test_recurring_series(db_session):
    rows, group_id = _create(db_session, is_recurring=True, recurring_days=7, max_recurrences=4)
    assert group_id
    assert [r.date for r in rows] == ["2024-06-10", "2024-06-17", "2024-06-24", "2024-07-01"]
    assert [r.recurring_index for r in rows] == [0, 1, 2, 3]
    assert {r.recurring_group_id for r in rows} == {group_id}


def test_list_is_ordered_and_range_bounded(db_session):
    _create(db_session, date_str="2024-06-12", start_time=18, end_time=20)
    _create(db_session, date_str="2024-06-10", start_time=19, end_time=21)
    _create(db_session, date_str="2024-06-10", start_time=9, end_time=10)
    _create(db_session, date_str="2024-06-30", start_time=9, end_time=10)
    _create(db_session, campaign_id="c2")
    rows = list_sessions(db_session, "c1", DateRange(date(2024, 6, 10), date(2024, 6, 16)))
    assert [(r.date, r.start_time) for r in rows] == [("2024-06-10", 9), ("2024-06-10", 19), ("2024-06-12", 18)]
    infos = list_session_infos(db_session, "c1")
    assert len(infos) == 4
    assert infos[0].covers("2024-06-10", 9.5)


def test_update_checks_campaign(db_session):
    rows, _ = _create(db_session)
    updated = update_session(
        db_session, rows[0].id, campaign_id="c1", title="Moved", date_str="2024-06-11", start_time=18, end_time=21
    )
    assert (updated.title, updated.date) == ("Moved", "2024-06-11")
    with pytest.raises(PermissionDeniedError):
        update_session(
            db_session, rows[0].id, campaign_id="c2", title="x", date_str="2024-06-11", start_time=18, end_time=21
        )
    with pytest.raises(NotFoundError):
        update_session(db_session, 999, campaign_id="c1", title="x", date_str="2024-06-11", start_time=18, end_time=21)


def test_deleting_first_of_short_group_appends_next(db_session):
    rows, group_id = _create(db_session, is_recurring=True, recurring_days=7, max_recurrences=3)
    # Group is full: deleting the first just removes it
    assert delete_session(db_session, rows[0].id, campaign_id="c1") is None
    remaining = list_sessions(db_session, "c1")
    assert [r.date for r in remaining] == ["2024-06-17", "2024-06-24"]

    appended = delete_session(db_session, remaining[0].id, campaign_id="c1")
    assert appended is not None
    assert appended.date == "2024-07-01"
    assert appended.recurring_group_id == group_id
    assert appended.recurring_index == 3
    assert [r.date for r in list_sessions(db_session, "c1")] == ["2024-06-24", "2024-07-01"]


def test_deleting_later_session_does_not_append(db_session):
    rows, _ = _create(db_session, is_recurring=True, recurring_days=7, max_recurrences=3)
    delete_session(db_session, rows[0].id, campaign_id="c1")
    assert delete_session(db_session, rows[2].id, campaign_id="c1") is None
    assert len(list_sessions(db_session, "c1")) == 1


def test_delete_wrong_campaign(db_session):
    rows, _ = _create(db_session)
    with pytest.raises(PermissionDeniedError):
        delete_session(db_session, rows[0].id, campaign_id="c2")


def test_session_label(db_session):
    rows, _ = _create(db_session)
    assert session_to_dict(rows[0])["label"] == "7:00 PM - 10:30 PM"
    assert session_to_dict(rows[0], use_24h=True)["label"] == "19:00 - 22:30"


@pytest.mark.parametrize(
    "hour,use_24h,expected",
    [
        (0, False, "12:00 AM"),
        (9.5, False, "9:30 AM"),
        (12, False, "12:00 PM"),
        (14, False, "2:00 PM"),
        (14, True, "14:00"),
        (8.5, True, "08:30"),
        (24, True, "00:00"),
    ],
)
def test_format_time(hour, use_24h, expected):
    assert format_time(hour, use_24h) == expected


def test_format_time_range():
    assert format_time_range(13, 15) == "1:00 PM - 3:00 PM"
