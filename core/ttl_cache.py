"""
TTL Cache - In-memory response cache with lazy expiry

Entries are valid while `now - created_at < ttl`. Expired entries are
treated as absent and deleted on the lookup that finds them; there is no
background sweep.

Capacity is unbounded by default. Pass max_entries to evict the least
recently used entry once the bound is reached.
"""

import json
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional


@dataclass
class CacheEntry:
    payload: Any
    created_at: float
    ttl: float

    def is_valid(self, now: float) -> bool:
        return now - self.created_at < self.ttl

    def age(self, now: float) -> float:
        return now - self.created_at


def build_cache_key(endpoint: str, params: Optional[Dict[str, Any]] = None) -> str:
    """
    Cache key from an endpoint name and its parameters.

    None values are dropped and keys sorted, so {"sport": "nba"} and
    {"sport": "nba", "max_results": None} share a key.

    Example:
        >>> build_cache_key("player-props", {"sport": "nba", "max_results": 10})
        'player-props:{"max_results": 10, "sport": "nba"}'
    """
    cleaned = {k: v for k, v in (params or {}).items() if v is not None}
    return f"{endpoint}:{json.dumps(cleaned, sort_keys=True, default=str)}"


class TTLCache:
    """
    Time-to-live cache.

    Args:
        default_ttl: Seconds an entry stays valid when set() gets no ttl
        max_entries: Optional capacity bound (LRU eviction); None = unbounded
        clock: Monotonic time source in seconds (injectable for tests)
    """

    def __init__(
        self,
        default_ttl: float = 300,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive, got {default_ttl}")
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._stats = {"hits": 0, "misses": 0, "expired": 0, "evictions": 0}

    def get(self, key: str) -> Optional[Any]:
        """Payload for key, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._stats["misses"] += 1
            return None

        if not entry.is_valid(self._clock()):
            del self._entries[key]
            self._stats["expired"] += 1
            self._stats["misses"] += 1
            return None

        self._entries.move_to_end(key)
        self._stats["hits"] += 1
        return entry.payload

    def set(self, key: str, payload: Any, ttl: Optional[float] = None) -> None:
        """Store payload under key, replacing any existing entry."""
        self._entries.pop(key, None)

        if self.max_entries is not None:
            while len(self._entries) >= self.max_entries:
                self._entries.popitem(last=False)
                self._stats["evictions"] += 1

        self._entries[key] = CacheEntry(
            payload=payload,
            created_at=self._clock(),
            ttl=ttl if ttl is not None else self.default_ttl,
        )

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def stats(self) -> Dict[str, Any]:
        """Cache statistics for debugging. Expired-but-unread entries still count."""
        return {
            "size": len(self._entries),
            "keys": self.keys(),
            "max_entries": self.max_entries,
            "default_ttl": self.default_ttl,
            **self._stats,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.is_valid(self._clock())


__all__ = [
    'CacheEntry',
    'TTLCache',
    'build_cache_key',
]
