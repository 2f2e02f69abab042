"""Binding of Matrix rooms to RealtimeKit meetings."""
from __future__ import annotations

import logging

from .binding_cache import BindingCache, meeting_cache_key
from .realtimekit import RealtimeKitClient

logger = logging.getLogger(__name__)


def meeting_title(room_id: str) -> str:
    return f"matrix-{room_id}"


class MeetingManager:
    """Resolve the live meeting for a room, creating one when needed.

    The cache is only a pointer: a hit is trusted after the meeting passes a
    liveness probe, and a failed probe evicts the entry before a new meeting is
    created. There is no locking, so two concurrent misses for the same room
    each create a meeting and the last cache write wins.
    """

    def __init__(self, client: RealtimeKitClient, cache: BindingCache, *, ttl_seconds: int) -> None:
        self._client = client
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    async def get_or_create(self, room_id: str) -> str:
        key = meeting_cache_key(room_id)

        cached = await self._cache.get(key)
        if cached:
            if await self._client.meeting_exists(cached):
                return cached
            logger.info("Cached RTK meeting is gone, recreating", extra={"room_id": room_id, "meeting_id": cached})
            await self._cache.delete(key)

        meeting_id = await self._client.create_meeting(meeting_title(room_id))
        await self._cache.put(key, meeting_id, self._ttl_seconds)
        logger.info("Created RTK meeting", extra={"room_id": room_id, "meeting_id": meeting_id})
        return meeting_id

    async def invalidate(self, room_id: str) -> None:
        await self._cache.delete(meeting_cache_key(room_id))
