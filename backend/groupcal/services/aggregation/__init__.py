"""
Group availability aggregation: counts, tiers and session annotation per displayed slot.
"""
from groupcal.services.aggregation.aggregate import Slot, SlotGrid, aggregate, tier_for, tier_rank

__all__ = ["Slot", "SlotGrid", "aggregate", "tier_for", "tier_rank"]
