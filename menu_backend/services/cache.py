"""
In-memory TTL cache for sheet and weather lookups.

Expired entries are kept: `get` reports them as stale so a failed refresh
can still serve the last good value.
"""
import time
from typing import Any, Callable, Optional


class TTLCache:
    """Keyed cache with a single TTL and an injectable clock"""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._values: dict = {}
        self._stored_at: dict = {}

    def get(self, key: str) -> tuple[Optional[Any], bool]:
        """Return (value, is_fresh); (None, False) when nothing is stored"""
        if key not in self._values:
            return None, False
        age = self._clock() - self._stored_at[key]
        return self._values[key], age < self.ttl_seconds

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._stored_at[key] = self._clock()

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one key, or everything when no key is given"""
        if key is None:
            self._values.clear()
            self._stored_at.clear()
            return
        self._values.pop(key, None)
        self._stored_at.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def stats(self) -> dict:
        now = self._clock()
        fresh = sum(1 for stored in self._stored_at.values() if now - stored < self.ttl_seconds)
        return {
            "total_keys": len(self._values),
            "fresh_keys": fresh,
            "stale_keys": len(self._values) - fresh,
        }
