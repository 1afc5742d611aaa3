from groupcal.models.availability import AvailabilityRecord, AvailabilitySlot
from groupcal.models.campaign import Campaign, CampaignMember
from groupcal.models.scheduled_session import ScheduledSession
from groupcal.models.setting import Setting

__all__ = [
    "AvailabilityRecord",
    "AvailabilitySlot",
    "Campaign",
    "CampaignMember",
    "ScheduledSession",
    "Setting",
]
