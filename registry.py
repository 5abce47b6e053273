"""
watchdogd — Check-in registry
The in-memory key → last-seen map. It is the single source of truth; the JSON
file written by storage.py is only a copy of it.
"""
import threading
from datetime import datetime, timezone


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Registry:
    """Lock-guarded mapping of check-in key to last-seen UTC timestamp.

    Keys are never removed. Readers get copies, never the live dict.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._checkins: dict[str, datetime] = {}

    def record(self, key: str, timestamp: datetime | None = None) -> datetime:
        """Store a check-in for `key` and return the timestamp written.

        Without an explicit timestamp the clock is read under the lock, so
        check-ins land in the same order they were stamped.
        """
        with self._lock:
            if timestamp is None:
                timestamp = now_utc()
            self._checkins[key] = timestamp
        return timestamp

    def lookup(self, key: str) -> datetime | None:
        with self._lock:
            return self._checkins.get(key)

    def snapshot(self) -> dict[str, datetime]:
        with self._lock:
            return dict(self._checkins)

    def restore(self, state: dict[str, datetime]) -> None:
        """Replace the whole map, used once at startup with the loaded file."""
        with self._lock:
            self._checkins = dict(state)

    def __len__(self) -> int:
        with self._lock:
            return len(self._checkins)
