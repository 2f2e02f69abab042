"""FastAPI dependency providers for the RTC endpoints."""
from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .core.config import CallConfig, Settings, get_settings, load_call_config
from .db.session import get_session
from .services.binding_cache import BindingCache, binding_cache
from .services.directory import Directory, SqlDirectory
from .services.identity import IdentityAuthority, OpenIdVerifier
from .services.meetings import MeetingManager
from .services.participants import ParticipantIssuer
from .services.realtimekit import RealtimeKitClient
from .services.tokens import TokenIssuer


def get_call_config(settings: Settings = Depends(get_settings)) -> CallConfig | None:
    return load_call_config(settings)


async def get_http_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    """Outbound client shared by every upstream call of one request."""

    timeout = httpx.Timeout(settings.http_timeout_seconds, connect=min(5.0, settings.http_timeout_seconds))
    async with httpx.AsyncClient(timeout=timeout) as client:
        yield client


def get_binding_cache() -> BindingCache:
    return binding_cache


def get_directory(session: AsyncSession = Depends(get_session)) -> Directory:
    return SqlDirectory(session)


def get_identity_authority(
    settings: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> IdentityAuthority:
    return OpenIdVerifier(settings.server_name, http)


def get_token_issuer(
    config: CallConfig | None = Depends(get_call_config),
    settings: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
    identity: IdentityAuthority = Depends(get_identity_authority),
    directory: Directory = Depends(get_directory),
    cache: BindingCache = Depends(get_binding_cache),
) -> TokenIssuer | None:
    """Assemble the issuer, or ``None`` when calls are not configured."""

    if config is None:
        return None
    client = RealtimeKitClient(config, http, api_base=settings.rtk_api_base)
    return TokenIssuer(
        identity=identity,
        directory=directory,
        meetings=MeetingManager(client, cache, ttl_seconds=settings.meeting_cache_ttl_seconds),
        participants=ParticipantIssuer(client, config.preset_name),
    )
