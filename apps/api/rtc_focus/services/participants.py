"""Participant token issuance for RealtimeKit meetings."""
from __future__ import annotations

import re

from .realtimekit import RealtimeKitClient

_DISALLOWED_PARTICIPANT_CHARS = re.compile(r"[^a-zA-Z0-9_\-:.@]")


def build_participant_id(user_id: str, device_id: str) -> str:
    """Return the RTK custom participant id for a user's device."""

    return _DISALLOWED_PARTICIPANT_CHARS.sub("_", f"{user_id}:{device_id}")


class ParticipantIssuer:
    """Request participant tokens using the configured preset.

    Repeated calls for the same device create separate participants at the
    backend; the custom id is for correlation only.
    """

    def __init__(self, client: RealtimeKitClient, preset_name: str) -> None:
        self._client = client
        self._preset_name = preset_name

    async def issue(
        self,
        meeting_id: str,
        user_id: str,
        device_id: str,
        display_name: str | None = None,
    ) -> str:
        return await self._client.add_participant(
            meeting_id,
            name=display_name or user_id,
            preset_name=self._preset_name,
            custom_participant_id=build_participant_id(user_id, device_id),
        )
