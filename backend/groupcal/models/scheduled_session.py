"""Scheduled play session for a campaign. Date and hours are in the canonical timezone.

start_time/end_time are hours of day with half-hour granularity (0 <= start < end <= 24).
Recurring series share recurring_group_id; recurring_index orders them.
"""
from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.sql import func

from groupcal.db.base import Base


class ScheduledSession(Base):
    __tablename__ = "scheduled_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    campaign_id = Column(String(64), nullable=False, index=True)
    title = Column(String(256), nullable=False)
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    start_time = Column(Float, nullable=False)
    end_time = Column(Float, nullable=False)
    notes = Column(Text, nullable=False, default="")
    created_by = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_days = Column(Integer, nullable=False, default=0)
    recurring_group_id = Column(String(64), nullable=True, index=True)
    recurring_index = Column(Integer, nullable=False, default=0)
    max_recurrences = Column(Integer, nullable=False, default=0)
