"""Availability store adapter against SQLite."""

from datetime import date
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from groupcal.core.date_range import DateRange
from groupcal.core.errors import StoreUnavailableError
from groupcal.models import AvailabilityRecord, AvailabilitySlot
from groupcal.services.availability import get_all_availability, get_user_availability, set_slot

DAY = date(2024, 6, 10)
WEEK = DateRange(date(2024, 6, 10), date(2024, 6, 16))


def test_set_slot_creates_record_lazily(db_session):
    assert db_session.query(AvailabilityRecord).count() == 0
    assert set_slot(db_session, "alice", "c1", DAY, 14, True) is True
    assert db_session.query(AvailabilityRecord).count() == 1
    assert get_user_availability(db_session, "alice", "c1", WEEK) == {"2024-06-10-14": True}


def test_writing_one_hour_leaves_sibling_hours_alone(db_session):
    set_slot(db_session, "alice", "c1", DAY, 9, True)
    set_slot(db_session, "alice", "c1", DAY, 14, True)
    slots = get_user_availability(db_session, "alice", "c1", WEEK)
    assert slots["2024-06-10-9"] is True
    assert slots["2024-06-10-14"] is True
    assert db_session.query(AvailabilityRecord).count() == 1


def test_rewrite_updates_in_place(db_session):
    set_slot(db_session, "alice", "c1", DAY, 14, True)
    set_slot(db_session, "alice", "c1", DAY, 14, False)
    slots = get_user_availability(db_session, "alice", "c1", WEEK)
    assert slots["2024-06-10-14"] is False
    assert db_session.query(AvailabilitySlot).count() == 1


def test_half_hour_keys(db_session):
    set_slot(db_session, "alice", "c1", DAY, 14.5, True)
    assert get_user_availability(db_session, "alice", "c1", WEEK).true_keys() == {"2024-06-10-14.5"}


def test_reads_are_scoped_by_campaign_range_and_user(db_session):
    set_slot(db_session, "alice", "c1", DAY, 10, True)
    set_slot(db_session, "alice", "c2", DAY, 11, True)
    set_slot(db_session, "alice", "c1", date(2024, 6, 20), 12, True)
    set_slot(db_session, "bob", "c1", date(2024, 6, 12), 13, True)

    assert get_user_availability(db_session, "alice", "c1", WEEK) == {"2024-06-10-10": True}
    everyone = get_all_availability(db_session, "c1", WEEK)
    assert set(everyone) == {"alice", "bob"}
    assert everyone["bob"] == {"2024-06-12-13": True}
    assert everyone["bob"]["2024-06-10-10"] is False


def test_read_failure_raises_store_unavailable():
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
    with pytest.raises(StoreUnavailableError):
        get_all_availability(db, "c1", WEEK)
    with pytest.raises(StoreUnavailableError):
        get_user_availability(db, "alice", "c1", WEEK)


def test_write_failure_rolls_back_and_raises():
    db = MagicMock()
    db.get_bind.return_value.dialect.name = "postgresql"
    db.execute.side_effect = OperationalError("INSERT", {}, Exception("connection refused"))
    with pytest.raises(StoreUnavailableError):
        set_slot(db, "alice", "c1", DAY, 14, True)
    db.rollback.assert_called_once()
    db.commit.assert_not_called()
