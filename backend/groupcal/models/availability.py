"""Per-user availability: one record per (username, campaign_id, date), one slot row per canonical hour key.

Hour keys are canonical-timezone hours encoded as strings ("14", "14.5"). A missing slot row
means unavailable. Slots are upserted one key at a time so writes to sibling hours never clobber.
"""
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from groupcal.db.base import Base


class AvailabilityRecord(Base):
    __tablename__ = "availability_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), nullable=False, index=True)
    campaign_id = Column(String(64), nullable=False, index=True)
    date = Column(Date, nullable=False)  # calendar day in the canonical timezone
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    slots = relationship("AvailabilitySlot", back_populates="record", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("username", "campaign_id", "date", name="uq_availability_records_user_campaign_date"),
    )


class AvailabilitySlot(Base):
    __tablename__ = "availability_slots"

    record_id = Column(Integer, ForeignKey("availability_records.id", ondelete="CASCADE"), primary_key=True)
    hour_key = Column(String(8), primary_key=True)
    is_available = Column(Boolean, nullable=False, default=False)

    record = relationship("AvailabilityRecord", back_populates="slots")
