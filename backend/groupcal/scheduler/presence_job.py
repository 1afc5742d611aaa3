"""
Presence sweep: every PRESENCE_SWEEP_SECONDS, evict users whose last heartbeat is older
than the presence timeout. Runs in the BackgroundScheduler thread.
"""
import logging

from groupcal.services.presence import PresenceStore

logger = logging.getLogger(__name__)


def run_presence_sweep(store: PresenceStore) -> int:
    try:
        evicted = store.sweep()
    except Exception as e:
        logger.warning("Presence sweep failed: %s", e, exc_info=True)
        return 0
    if evicted:
        logger.info("Presence sweep evicted %s user(s); %s active", evicted, len(store))
    return evicted
