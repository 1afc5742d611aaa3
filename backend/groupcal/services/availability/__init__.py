"""
Availability: sparse per-user slot maps and the store adapter that persists them.
"""
from groupcal.services.availability.slot_map import (
    SlotMap,
    all_users_from_raw,
    coerce_available,
    hour_key,
    parse_slot_key,
    slot_key,
)
from groupcal.services.availability.localize import localize
from groupcal.services.availability.store import get_all_availability, get_user_availability, set_slot

__all__ = [
    "SlotMap",
    "all_users_from_raw",
    "coerce_available",
    "get_all_availability",
    "get_user_availability",
    "hour_key",
    "localize",
    "parse_slot_key",
    "set_slot",
    "slot_key",
]
