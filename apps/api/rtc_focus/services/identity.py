"""OpenID token verification against the homeserver's federation API."""
from __future__ import annotations

import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


class IdentityVerificationError(RuntimeError):
    """Raised when an OpenID token cannot be resolved to a user."""


class IdentityAuthority(Protocol):
    async def introspect(self, access_token: str) -> str:
        """Return the Matrix user id the token was issued to."""
        ...


class OpenIdVerifier:
    """Resolve OpenID tokens via ``/_matrix/federation/v1/openid/userinfo``."""

    def __init__(self, server_name: str, http: httpx.AsyncClient) -> None:
        self._userinfo_url = f"https://{server_name}/_matrix/federation/v1/openid/userinfo"
        self._http = http

    async def introspect(self, access_token: str) -> str:
        try:
            response = await self._http.get(self._userinfo_url, params={"access_token": access_token})
        except httpx.HTTPError as exc:
            raise IdentityVerificationError(f"userinfo request failed: {exc}") from exc

        if not response.is_success:
            raise IdentityVerificationError(f"userinfo returned {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise IdentityVerificationError("userinfo returned invalid JSON") from exc

        subject = payload.get("sub") if isinstance(payload, dict) else None
        if not isinstance(subject, str) or not subject:
            raise IdentityVerificationError("no sub in userinfo")
        return subject
