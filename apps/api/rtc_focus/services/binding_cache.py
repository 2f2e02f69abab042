"""Room to meeting binding cache."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol


def meeting_cache_key(room_id: str) -> str:
    return f"rtk_meeting:{room_id}"


class BindingCache(Protocol):
    """Key-value store with per-entry expiry."""

    async def get(self, key: str) -> Optional[str]: ...

    async def put(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...


@dataclass
class _CacheEntry:
    value: str
    expires_at: float


class InMemoryBindingCache:
    """Process-local binding cache with TTL eviction.

    Not a lock: concurrent writers for the same key simply overwrite each other.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, _CacheEntry] = {}

    async def get(self, key: str) -> Optional[str]:
        self._evict_expired()
        entry = self._entries.get(key)
        return entry.value if entry else None

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self._evict_expired()
        self._entries[key] = _CacheEntry(value=value, expires_at=self._clock() + ttl_seconds)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            self._entries.pop(key, None)


binding_cache = InMemoryBindingCache()
