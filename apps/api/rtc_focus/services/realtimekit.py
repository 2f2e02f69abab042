"""Cloudflare RealtimeKit REST client.

Meetings and participants are created against the account-scoped kit API:
``{api_base}/accounts/{account_id}/realtime/kit/{app_id}``. Responses wrap
their payload either in ``result`` or in ``data``; both are accepted.
"""
from __future__ import annotations

from typing import Any

import httpx

from ..core.config import DEFAULT_RTK_API_BASE, CallConfig


class RealtimeKitError(RuntimeError):
    """Base class for failures talking to RealtimeKit."""


class BackendUnavailableError(RealtimeKitError):
    """Raised when a meeting cannot be looked up or created."""


class MeetingExpiredError(RealtimeKitError):
    """Raised when a participant is requested for a meeting that no longer exists."""

    def __init__(self, meeting_id: str) -> None:
        self.meeting_id = meeting_id
        super().__init__(f"RTK meeting {meeting_id} expired")


class BackendError(RealtimeKitError):
    """Raised for any other non-success participant response."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"RTK add participant failed {status_code}: {body}")


class MalformedBackendResponseError(RealtimeKitError):
    """Raised when a success response lacks the expected field."""


def _unwrap(payload: Any, field: str) -> Any:
    if not isinstance(payload, dict):
        return None
    for envelope in ("result", "data"):
        inner = payload.get(envelope)
        if isinstance(inner, dict) and inner.get(field):
            return inner[field]
    return None


class RealtimeKitClient:
    """Thin async wrapper over the meetings and participants endpoints."""

    def __init__(self, config: CallConfig, http: httpx.AsyncClient, *, api_base: str = DEFAULT_RTK_API_BASE) -> None:
        self._config = config
        self._http = http
        self._base_url = (
            f"{api_base.rstrip('/')}/accounts/{config.account_id}/realtime/kit/{config.app_id}"
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_token}",
        }

    async def meeting_exists(self, meeting_id: str) -> bool:
        """Probe whether the meeting is still alive."""

        try:
            response = await self._http.get(f"{self._base_url}/meetings/{meeting_id}", headers=self._headers())
        except httpx.HTTPError as exc:
            raise BackendUnavailableError(f"RTK meeting lookup failed: {exc}") from exc
        return response.is_success

    async def create_meeting(self, title: str) -> str:
        """Create a meeting and return its identifier."""

        try:
            response = await self._http.post(
                f"{self._base_url}/meetings",
                headers=self._headers(),
                json={"title": title},
            )
        except httpx.HTTPError as exc:
            raise BackendUnavailableError(f"RTK create meeting request failed: {exc}") from exc

        if not response.is_success:
            raise BackendUnavailableError(f"RTK create meeting failed {response.status_code}: {response.text}")

        try:
            meeting_id = _unwrap(response.json(), "id")
        except ValueError as exc:
            raise BackendUnavailableError("RTK create meeting returned invalid JSON") from exc
        if not meeting_id:
            raise BackendUnavailableError("RTK create meeting returned no ID")
        return str(meeting_id)

    async def add_participant(
        self,
        meeting_id: str,
        *,
        name: str,
        preset_name: str,
        custom_participant_id: str,
    ) -> str:
        """Register a participant on the meeting and return their auth token."""

        try:
            response = await self._http.post(
                f"{self._base_url}/meetings/{meeting_id}/participants",
                headers=self._headers(),
                json={
                    "name": name,
                    "preset_name": preset_name,
                    "custom_participant_id": custom_participant_id,
                },
            )
        except httpx.HTTPError as exc:
            raise BackendUnavailableError(f"RTK add participant request failed: {exc}") from exc

        if response.status_code == 404:
            raise MeetingExpiredError(meeting_id)
        if not response.is_success:
            raise BackendError(response.status_code, response.text)

        try:
            token = _unwrap(response.json(), "token")
        except ValueError as exc:
            raise MalformedBackendResponseError("RTK add participant returned invalid JSON") from exc
        if not token:
            raise MalformedBackendResponseError("RTK add participant returned no token")
        return str(token)
