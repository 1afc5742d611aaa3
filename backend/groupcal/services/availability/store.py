"""
Availability store adapter: (username, campaign_id, date, canonical hour) -> bool.

All hour keys exchanged here are canonical-timezone hours; conversion to the viewer's
local hours happens at the UI-facing edges, never in this module.

set_slot is a per-key upsert: the day record is created on first write, then only the
one hour row is inserted or updated, so concurrent writes to sibling hours of the same
day never erase each other (last write wins per hour key).
"""
import logging
from datetime import date

from sqlalchemy import func, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from groupcal.core.date_range import DateRange
from groupcal.core.errors import StoreUnavailableError
from groupcal.models.availability import AvailabilityRecord, AvailabilitySlot
from groupcal.services.availability.slot_map import SlotMap, coerce_available, hour_key

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _slot_rows(db: Session, campaign_id: str, date_range: DateRange, username: str | None = None):
    q = (
        db.query(
            AvailabilityRecord.username,
            AvailabilityRecord.date,
            AvailabilitySlot.hour_key,
            AvailabilitySlot.is_available,
        )
        .join(AvailabilitySlot, AvailabilitySlot.record_id == AvailabilityRecord.id)
        .filter(
            AvailabilityRecord.campaign_id == campaign_id,
            AvailabilityRecord.date >= date_range.start,
            AvailabilityRecord.date <= date_range.end,
        )
    )
    if username is not None:
        q = q.filter(AvailabilityRecord.username == username)
    return q.all()


def get_user_availability(db: Session, username: str, campaign_id: str, date_range: DateRange) -> SlotMap:
    """One user's canonical slot map for the range. Days without a record contribute nothing (all False)."""
    try:
        rows = _slot_rows(db, campaign_id, date_range, username=username)
    except SQLAlchemyError as e:
        logger.warning("get_user_availability failed for %s/%s: %s", username, campaign_id, e, exc_info=True)
        raise StoreUnavailableError("Availability store unavailable") from e
    return SlotMap.from_rows((d, key, value) for _, d, key, value in rows)


def get_all_availability(db: Session, campaign_id: str, date_range: DateRange) -> dict[str, SlotMap]:
    """username -> canonical slot map, for every user with at least one record in the range."""
    try:
        rows = _slot_rows(db, campaign_id, date_range)
    except SQLAlchemyError as e:
        logger.warning("get_all_availability failed for %s: %s", campaign_id, e, exc_info=True)
        raise StoreUnavailableError("Availability store unavailable") from e
    out: dict[str, SlotMap] = {}
    for username, d, key, value in rows:
        out.setdefault(username, SlotMap())[f"{d.isoformat()}-{key}"] = coerce_available(value)
    return out


def _record_id(db: Session, username: str, campaign_id: str, day: date) -> int | None:
    row = (
        db.query(AvailabilityRecord.id)
        .filter(
            AvailabilityRecord.username == username,
            AvailabilityRecord.campaign_id == campaign_id,
            AvailabilityRecord.date == day,
        )
        .first()
    )
    return row[0] if row else None


def _get_or_create_record_id(db: Session, username: str, campaign_id: str, day: date) -> int:
    insert = _DIALECT_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(AvailabilityRecord).values(username=username, campaign_id=campaign_id, date=day)
        db.execute(stmt.on_conflict_do_nothing(index_elements=["username", "campaign_id", "date"]))
        return _record_id(db, username, campaign_id, day)
    # Other dialects: create, and on a lost race read back the winner's row
    existing = _record_id(db, username, campaign_id, day)
    if existing is not None:
        return existing
    try:
        with db.begin_nested():
            record = AvailabilityRecord(username=username, campaign_id=campaign_id, date=day)
            db.add(record)
        return record.id
    except IntegrityError:
        return _record_id(db, username, campaign_id, day)


def _upsert_slot(db: Session, record_id: int, key: str, is_available: bool) -> None:
    insert = _DIALECT_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(AvailabilitySlot).values(record_id=record_id, hour_key=key, is_available=is_available)
        stmt = stmt.on_conflict_do_update(
            index_elements=["record_id", "hour_key"],
            set_={"is_available": stmt.excluded.is_available},
        )
        db.execute(stmt)
        return
    slot = db.get(AvailabilitySlot, (record_id, key))
    if slot is None:
        db.add(AvailabilitySlot(record_id=record_id, hour_key=key, is_available=is_available))
    else:
        slot.is_available = is_available


def set_slot(
    db: Session,
    username: str,
    campaign_id: str,
    day: date,
    canonical_hour: float,
    is_available: bool,
) -> bool:
    """
    Persist one slot. Creates the (username, campaign_id, day) record lazily, then merges
    the single hour key. Raises StoreUnavailableError if the write fails; the caller
    reverts any optimistic state.
    """
    key = hour_key(canonical_hour)
    try:
        record_id = _get_or_create_record_id(db, username, campaign_id, day)
        _upsert_slot(db, record_id, key, bool(is_available))
        db.execute(
            update(AvailabilityRecord)
            .where(AvailabilityRecord.id == record_id)
            .values(updated_at=func.now())
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(
            "set_slot failed for %s/%s %s-%s: %s", username, campaign_id, day, key, e, exc_info=True
        )
        raise StoreUnavailableError("Availability store unavailable") from e
    logger.debug("set_slot %s/%s %s-%s=%s", username, campaign_id, day, key, is_available)
    return True
