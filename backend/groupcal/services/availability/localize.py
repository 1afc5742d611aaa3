"""Canonical <-> viewer-local conversion of whole slot maps, for the display path."""
import logging

from groupcal.services.availability.slot_map import SlotMap, parse_slot_key
from groupcal.services.timezone.hours import ViewerTimezoneContext

logger = logging.getLogger(__name__)


def localize(canonical: SlotMap, tz: ViewerTimezoneContext) -> SlotMap:
    """Re-key a canonical map by the viewer's local (day, hour). Unparseable keys are dropped."""
    if tz.is_canonical:
        return canonical.copy()
    out = SlotMap()
    for key, value in canonical.items():
        try:
            day, hour = parse_slot_key(key)
        except ValueError:
            logger.debug("Skipping malformed slot key %r", key)
            continue
        local_day, local_hour = tz.to_local_slot(day, hour)
        out.set(local_day, local_hour, value)
    return out
