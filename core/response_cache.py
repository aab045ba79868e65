"""
Time-limited cache for API reads.

List and detail reads are kept for a TTL (5 minutes by default) and dropped
by key prefix whenever a write touches the same collection.
"""
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class ResponseCache:
    """In-memory TTL cache keyed by tuples such as ("iocs", "list")."""

    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[Tuple, Tuple[float, Any]] = {}

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl

    def get(self, key: Tuple) -> Optional[Any]:
        """Cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._expired(stored_at, self._clock()):
            del self._entries[key]
            return None
        return value

    def set(self, key: Tuple, value: Any):
        self.prune()
        self._entries[key] = (self._clock(), value)

    def prune(self) -> int:
        """Drop every expired entry; returns the count."""
        now = self._clock()
        stale = [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def get_or_load(self, key: Tuple, loader: Callable[[], Any]) -> Any:
        value = self.get(key)
        if value is None:
            value = loader()
            self.set(key, value)
        return value

    def invalidate(self, *prefix: Any) -> int:
        """Drop every entry whose key starts with prefix; returns the count."""
        n = len(prefix)
        stale = [k for k in self._entries if k[:n] == prefix]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("Invalidated %d cache entries for %s", len(stale), prefix)
        return len(stale)

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
