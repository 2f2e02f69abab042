"""MatrixRTC focus discovery and token issuance endpoints.

Element Web / Element X start a call by publishing ``m.call.member`` state,
asking ``/rtc/transports`` which focus to use, then posting an OpenID token to
that focus' token endpoint. We advertise our own ``/rtk/get_token`` and hand
back RealtimeKit participant tokens from there.
"""
from __future__ import annotations

import json

import httpx
from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError

from ..core.config import CallConfig, Settings, get_settings
from ..core.errors import InvalidBodyError, MissingParameterError, NotConfiguredError
from ..dependencies import get_call_config, get_token_issuer
from ..schemas.rtc import ErrorResponse, GetTokenRequest, TokenResponse, TransportsResponse
from ..services import discovery
from ..services.tokens import TokenIssuer

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}
# Recomputed by the inner request.
_HOP_HEADERS = {"host", "content-length"}


@router.get("/_matrix/client/unstable/org.matrix.msc4143/rtc/transports", response_model=TransportsResponse)
async def rtc_transports(
    config: CallConfig | None = Depends(get_call_config),
    settings: Settings = Depends(get_settings),
) -> TransportsResponse:
    """Tell clients which focus to use for calls. Unauthenticated."""

    return discovery.discover(config, settings.server_name)


async def _read_token_request(request: Request) -> GetTokenRequest:
    try:
        body = json.loads(await request.body())
    except (ValueError, RecursionError) as exc:
        raise InvalidBodyError() from exc
    try:
        return GetTokenRequest.model_validate(body)
    except ValidationError as exc:
        raise MissingParameterError() from exc


@router.post(discovery.TOKEN_ENDPOINT_PATH, response_model=TokenResponse, responses=_ERROR_RESPONSES)
async def get_token(
    request: Request,
    issuer: TokenIssuer | None = Depends(get_token_issuer),
) -> TokenResponse:
    """Exchange an OpenID token for a RealtimeKit participant token."""

    if issuer is None:
        raise NotConfiguredError()
    token_request = await _read_token_request(request)
    token = await issuer.issue(token_request)
    return TokenResponse(access_token=token)


@router.post("/livekit/get_token", responses=_ERROR_RESPONSES, include_in_schema=False)
async def legacy_get_token(request: Request) -> Response:
    """Older Element X builds post here; replay the request on the canonical path."""

    headers = {key: value for key, value in request.headers.items() if key.lower() not in _HOP_HEADERS}
    transport = httpx.ASGITransport(app=request.app)
    async with httpx.AsyncClient(transport=transport, base_url=str(request.base_url)) as client:
        forwarded = await client.request(
            request.method,
            discovery.TOKEN_ENDPOINT_PATH,
            headers=headers,
            content=await request.body(),
        )

    response_headers = {
        key: value for key, value in forwarded.headers.items() if key.lower() not in _HOP_HEADERS
    }
    return Response(content=forwarded.content, status_code=forwarded.status_code, headers=response_headers)
