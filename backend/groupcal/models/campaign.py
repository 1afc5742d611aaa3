"""Campaign and its roster. Managed by the admin surface; the calendar only reads members."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from groupcal.db.base import Base


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(String(64), primary_key=True)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=False, default="")
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class CampaignMember(Base):
    __tablename__ = "campaign_members"

    campaign_id = Column(String(64), ForeignKey("campaigns.id", ondelete="CASCADE"), primary_key=True)
    username = Column(String(64), primary_key=True)
