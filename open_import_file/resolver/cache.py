"""Time-based cache for config snapshots.

Entries are immutable and replaced by a single key assignment, so readers
never block and no locking is needed. A reader may briefly see a stale entry
while another caller reloads it; the TTL is a freshness bound only.
"""

import logging
import time
from collections.abc import Callable

from .models import DEFAULT_CACHE_TTL_SECONDS
from .models import CacheEntry
from .models import ConfigSnapshot

logger = logging.getLogger(__name__)


class SnapshotCache:
    """Config snapshots keyed by the most specific config file of a context.

    Args:
        ttl_seconds: Maximum entry age before it is recomputed
        clock: Monotonic time source in seconds (injectable for tests)
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> ConfigSnapshot | None:
        """Return the snapshot for key, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.created_at >= self.ttl_seconds:
            logger.debug(f"[config] cache entry expired: {key}")
            return None
        return entry.snapshot

    def put(self, key: str, snapshot: ConfigSnapshot) -> ConfigSnapshot:
        self._entries[key] = CacheEntry(snapshot=snapshot, created_at=self._clock())
        return snapshot

    def get_or_load(self, key: str, load: Callable[[], ConfigSnapshot]) -> ConfigSnapshot:
        """Return a fresh cached snapshot, or build one with load() and store it."""
        snapshot = self.get(key)
        if snapshot is not None:
            return snapshot
        return self.put(key, load())

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SnapshotCache(ttl={self.ttl_seconds}s, entries={len(self._entries)})"
