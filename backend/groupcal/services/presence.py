"""
Active-user presence: username -> last-seen time, bounded by a timeout.

One PresenceStore per process, owned by the FastAPI app (app.state.presence). Heartbeats
touch a user; active() hides entries older than the timeout; sweep() physically evicts them
and is run on an interval by the background scheduler. Nothing is shared across instances.
"""
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PresenceStore:
    def __init__(self, timeout: timedelta = timedelta(minutes=30), clock: Callable[[], datetime] = _utcnow) -> None:
        self.timeout = timeout
        self._clock = clock
        self._last_seen: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def touch(self, username: str) -> datetime:
        now = self._clock()
        with self._lock:
            self._last_seen[username] = now
        return now

    def active(self) -> list[dict]:
        """Users seen within the timeout, most recent first."""
        cutoff = self._clock() - self.timeout
        with self._lock:
            items = [(u, t) for u, t in self._last_seen.items() if t >= cutoff]
        items.sort(key=lambda x: x[1], reverse=True)
        return [{"username": u, "last_seen": t.isoformat()} for u, t in items]

    def sweep(self) -> int:
        """Evict entries older than the timeout. Returns number evicted."""
        cutoff = self._clock() - self.timeout
        with self._lock:
            stale = [u for u, t in self._last_seen.items() if t < cutoff]
            for u in stale:
                del self._last_seen[u]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_seen)
