"""
Permission Cache
In-process, per-user TTL cache for bulk permission listings
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from adminvault_iam.core.config import DEFAULT_CACHE_TTL_MS
from adminvault_iam.core.logging import get_logger
from adminvault_iam.schemas.iam import Permission

logger = get_logger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class CacheEntry:
    """Cached permission list and the time (ms) it was fetched"""
    permissions: List[Permission] = field(default_factory=list)
    timestamp: float = 0.0


class PermissionCache:
    """
    Per-user permission cache with a configurable TTL

    Entries are overwritten on refresh, never merged. A stale entry is
    reported as a miss but is left in place until the next write or an
    explicit invalidation.
    """

    def __init__(self, ttl_ms: int = DEFAULT_CACHE_TTL_MS, clock: Optional[Callable[[], float]] = None):
        self._entries: Dict[str, CacheEntry] = {}
        self._clock = clock or _monotonic_ms
        self._ttl_ms = 0
        self.set_ttl(ttl_ms)

    @staticmethod
    def key_for(user_id) -> str:
        return f"user:{user_id}:permissions"

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    def set_ttl(self, ttl_ms: int) -> None:
        """Set the TTL used by all subsequent freshness checks"""
        if ttl_ms is None or ttl_ms < 0:
            raise ValueError("Cache TTL must be a non-negative number of milliseconds")
        self._ttl_ms = ttl_ms
        logger.debug("Permission cache TTL updated", ttl_ms=ttl_ms)

    def _is_fresh(self, entry: CacheEntry) -> bool:
        # The boundary itself counts as stale
        return self._clock() - entry.timestamp < self._ttl_ms

    def get(self, user_id) -> Optional[List[Permission]]:
        """Return the cached permissions for a user, or None on miss or staleness"""
        entry = self._entries.get(self.key_for(user_id))
        if entry is None:
            return None
        if not self._is_fresh(entry):
            logger.debug("Permission cache entry stale", user_id=user_id)
            return None
        return list(entry.permissions)

    def entry(self, user_id) -> Optional[CacheEntry]:
        """Raw entry access, stale or not"""
        return self._entries.get(self.key_for(user_id))

    def set(self, user_id, permissions: List[Permission]) -> CacheEntry:
        """Store a user's permissions stamped with the current time"""
        entry = CacheEntry(permissions=list(permissions), timestamp=self._clock())
        self._entries[self.key_for(user_id)] = entry
        return entry

    def invalidate_user(self, user_id) -> bool:
        """Drop a single user's entry. Returns True if one was present."""
        removed = self._entries.pop(self.key_for(user_id), None) is not None
        if removed:
            logger.debug("Permission cache invalidated for user", user_id=user_id)
        return removed

    def invalidate_all(self) -> int:
        """Drop every entry. Returns count removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.debug("Permission cache cleared", entries=count)
        return count

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, user_id) -> bool:
        return self.get(user_id) is not None
