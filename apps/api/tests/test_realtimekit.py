"""Tests for the RealtimeKit REST client."""
from __future__ import annotations

import json

import httpx
import pytest

from conftest import CALL_CONFIG
from rtc_focus.services.realtimekit import (
    BackendError,
    BackendUnavailableError,
    MalformedBackendResponseError,
    MeetingExpiredError,
    RealtimeKitClient,
)

BASE = "https://api.cloudflare.com/client/v4/accounts/acct/realtime/kit/app"


def _client(handler) -> tuple[RealtimeKitClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(record))
    return RealtimeKitClient(CALL_CONFIG, http), seen


@pytest.mark.asyncio
async def test_create_meeting_posts_title_with_bearer_auth():
    client, seen = _client(lambda request: httpx.Response(200, json={"result": {"id": "m-1"}}))

    meeting_id = await client.create_meeting("matrix-!room:localhost")

    assert meeting_id == "m-1"
    request = seen[0]
    assert str(request.url) == f"{BASE}/meetings"
    assert request.headers["Authorization"] == "Bearer secret"
    assert json.loads(request.content) == {"title": "matrix-!room:localhost"}


@pytest.mark.asyncio
async def test_create_meeting_accepts_data_envelope():
    client, _ = _client(lambda request: httpx.Response(201, json={"data": {"id": "m-2"}}))

    assert await client.create_meeting("t") == "m-2"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(200, json={"result": {}}),
        httpx.Response(200, text="not json"),
    ],
)
async def test_create_meeting_failures_surface_as_unavailable(response):
    client, _ = _client(lambda request: response)

    with pytest.raises(BackendUnavailableError):
        await client.create_meeting("t")


@pytest.mark.asyncio
async def test_transport_errors_surface_as_unavailable():
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client, _ = _client(fail)

    with pytest.raises(BackendUnavailableError):
        await client.meeting_exists("m-1")
    with pytest.raises(BackendUnavailableError):
        await client.add_participant("m-1", name="n", preset_name="p", custom_participant_id="c")


@pytest.mark.asyncio
async def test_meeting_exists_reflects_status():
    client, seen = _client(
        lambda request: httpx.Response(200 if request.url.path.endswith("/alive") else 404)
    )

    assert await client.meeting_exists("alive") is True
    assert await client.meeting_exists("gone") is False
    assert all(request.method == "GET" for request in seen)


@pytest.mark.asyncio
async def test_add_participant_returns_token():
    client, seen = _client(lambda request: httpx.Response(200, json={"data": {"token": "jwt"}}))

    token = await client.add_participant(
        "m-1", name="Alice", preset_name="group_call_host", custom_participant_id="@alice:localhost:DEV"
    )

    assert token == "jwt"
    assert str(seen[0].url) == f"{BASE}/meetings/m-1/participants"
    assert json.loads(seen[0].content) == {
        "name": "Alice",
        "preset_name": "group_call_host",
        "custom_participant_id": "@alice:localhost:DEV",
    }


@pytest.mark.asyncio
async def test_add_participant_not_found_means_meeting_expired():
    client, _ = _client(lambda request: httpx.Response(404, text="no such meeting"))

    with pytest.raises(MeetingExpiredError) as exc:
        await client.add_participant("m-9", name="n", preset_name="p", custom_participant_id="c")

    assert exc.value.meeting_id == "m-9"


@pytest.mark.asyncio
async def test_add_participant_other_errors_keep_status_and_body():
    client, _ = _client(lambda request: httpx.Response(429, text="slow down"))

    with pytest.raises(BackendError) as exc:
        await client.add_participant("m-1", name="n", preset_name="p", custom_participant_id="c")

    assert exc.value.status_code == 429
    assert exc.value.body == "slow down"


@pytest.mark.asyncio
async def test_add_participant_without_token_is_malformed():
    client, _ = _client(lambda request: httpx.Response(200, json={"result": {"id": "p-1"}}))

    with pytest.raises(MalformedBackendResponseError):
        await client.add_participant("m-1", name="n", preset_name="p", custom_participant_id="c")
