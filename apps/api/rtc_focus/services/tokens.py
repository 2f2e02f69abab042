"""Call token issuance.

Turns a verified OpenID token into a RealtimeKit participant token:

1. verify the OpenID token with the identity authority;
2. require ``join`` membership in the requested room;
3. resolve (or create) the room's meeting;
4. request a participant token, recreating the meeting once if it expired.

Client errors stop the sequence before any later collaborator is contacted.
"""
from __future__ import annotations

import logging

from ..core.errors import (
    IdentityVerificationFailedError,
    NotAMemberError,
    SessionCreationFailedError,
    SessionJoinFailedError,
)
from ..models.membership import MembershipState
from ..schemas.rtc import GetTokenRequest
from .directory import Directory
from .identity import IdentityAuthority, IdentityVerificationError
from .meetings import MeetingManager
from .participants import ParticipantIssuer, build_participant_id
from .realtimekit import MeetingExpiredError, RealtimeKitError

FALLBACK_DEVICE_ID_LENGTH = 16

logger = logging.getLogger(__name__)


def fallback_device_id(access_token: str) -> str:
    """Derive a device id from the OpenID token when the client sent none or an empty one.

    Tokens sharing a prefix collide; callers that care must send ``device_id``.
    """

    return access_token[:FALLBACK_DEVICE_ID_LENGTH]


class TokenIssuer:
    """Orchestrate identity, membership and meeting checks for one request."""

    def __init__(
        self,
        *,
        identity: IdentityAuthority,
        directory: Directory,
        meetings: MeetingManager,
        participants: ParticipantIssuer,
    ) -> None:
        self._identity = identity
        self._directory = directory
        self._meetings = meetings
        self._participants = participants

    async def issue(self, request: GetTokenRequest) -> str:
        room_id = request.room
        access_token = request.openid_token.access_token

        try:
            user_id = await self._identity.introspect(access_token)
        except IdentityVerificationError as exc:
            logger.info("OpenID verification failed: %s", exc, extra={"room_id": room_id})
            raise IdentityVerificationFailedError() from exc
        device_id = request.candidate_device_id or fallback_device_id(access_token)

        membership = await self._directory.membership(room_id, user_id)
        if membership != MembershipState.JOIN.value:
            logger.info(
                "Rejected call token for non-member",
                extra={"room_id": room_id, "user_id": user_id, "membership": membership},
            )
            raise NotAMemberError()

        display_name = await self._directory.display_name(user_id) or user_id

        try:
            meeting_id = await self._meetings.get_or_create(room_id)
        except RealtimeKitError as exc:
            logger.exception("Failed to get/create meeting: %s", exc, extra={"room_id": room_id})
            raise SessionCreationFailedError() from exc

        context = {
            "room_id": room_id,
            "meeting_id": meeting_id,
            "participant_id": build_participant_id(user_id, device_id),
        }
        try:
            return await self._participants.issue(meeting_id, user_id, device_id, display_name)
        except MeetingExpiredError:
            logger.info("RTK meeting expired, retrying with a fresh meeting", extra=context)
        except RealtimeKitError as exc:
            logger.exception("addParticipant failed: %s", exc, extra=context)
            raise SessionJoinFailedError() from exc

        await self._meetings.invalidate(room_id)
        retry_meeting_id: str | None = None
        try:
            retry_meeting_id = await self._meetings.get_or_create(room_id)
            return await self._participants.issue(retry_meeting_id, user_id, device_id, display_name)
        except RealtimeKitError as exc:
            logger.exception(
                "Retry failed: %s",
                exc,
                extra={**context, "meeting_id": retry_meeting_id, "expired_meeting_id": meeting_id},
            )
            raise SessionJoinFailedError() from exc
