"""Shared fakes for the RealtimeKit backend, identity authority and directory."""
from __future__ import annotations

import json

import httpx
import pytest

from rtc_focus.core.config import CallConfig
from rtc_focus.services.identity import IdentityVerificationError

CALL_CONFIG = CallConfig(account_id="acct", api_token="secret", app_id="app", preset_name="group_call_host")
ROOM_ID = "!room:localhost"
ALICE = "@alice:localhost"


class FakeRealtimeKit:
    """In-memory stand-in for the RealtimeKit REST API, served via MockTransport."""

    def __init__(self) -> None:
        self.meetings: set[str] = set()
        self.requests: list[httpx.Request] = []
        self.create_status = 200
        self.forced_participant_statuses: list[int] = []
        self._counter = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        _, _, tail = request.url.path.partition("/meetings")
        parts = [part for part in tail.split("/") if part]

        if request.method == "POST" and not parts:
            if self.create_status != 200:
                return httpx.Response(self.create_status, text="upstream exploded")
            self._counter += 1
            meeting_id = f"meeting-{self._counter}"
            self.meetings.add(meeting_id)
            return httpx.Response(200, json={"success": True, "result": {"id": meeting_id}})

        if request.method == "GET" and len(parts) == 1:
            if parts[0] in self.meetings:
                return httpx.Response(200, json={"success": True, "data": {"id": parts[0]}})
            return httpx.Response(404, json={"success": False})

        if request.method == "POST" and len(parts) == 2 and parts[1] == "participants":
            if self.forced_participant_statuses:
                return httpx.Response(self.forced_participant_statuses.pop(0), text="participant error")
            if parts[0] not in self.meetings:
                return httpx.Response(404, json={"success": False})
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={"success": True, "data": {"token": f"token-{parts[0]}-{body['custom_participant_id']}"}},
            )

        return httpx.Response(405)

    def expire(self, meeting_id: str) -> None:
        self.meetings.discard(meeting_id)

    def calls(self, method: str, suffix: str = "") -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.method == method and request.url.path.endswith(suffix)
        ]

    @property
    def create_calls(self) -> list[httpx.Request]:
        return self.calls("POST", "/meetings")

    @property
    def participant_calls(self) -> list[httpx.Request]:
        return self.calls("POST", "/participants")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class FakeIdentity:
    def __init__(self, subjects: dict[str, str] | None = None) -> None:
        self.subjects = subjects or {}
        self.calls: list[str] = []

    async def introspect(self, access_token: str) -> str:
        self.calls.append(access_token)
        try:
            return self.subjects[access_token]
        except KeyError:
            raise IdentityVerificationError("unknown token") from None


class FakeDirectory:
    def __init__(
        self,
        memberships: dict[tuple[str, str], str] | None = None,
        display_names: dict[str, str] | None = None,
    ) -> None:
        self.memberships = memberships or {}
        self.display_names = display_names or {}
        self.calls: list[tuple] = []

    async def membership(self, room_id: str, user_id: str) -> str | None:
        self.calls.append(("membership", room_id, user_id))
        return self.memberships.get((room_id, user_id))

    async def display_name(self, user_id: str) -> str | None:
        self.calls.append(("display_name", user_id))
        return self.display_names.get(user_id)


@pytest.fixture
def rtk() -> FakeRealtimeKit:
    return FakeRealtimeKit()


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity({"alice-openid-token-0001": ALICE, "bob-openid-token-0002": "@bob:localhost"})


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory(
        memberships={(ROOM_ID, ALICE): "join", (ROOM_ID, "@bob:localhost"): "invite"},
        display_names={ALICE: "Alice"},
    )
