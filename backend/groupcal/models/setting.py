"""Global settings row (key='global')."""
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from groupcal.db.base import Base


class Setting(Base):
    __tablename__ = "settings"

    key = Column(String(32), primary_key=True)
    max_future_weeks = Column(Integer, nullable=False, default=12)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
