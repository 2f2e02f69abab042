"""Data contracts for MatrixRTC endpoints."""
from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class Transport(BaseModel):
    type: str = Field(default="livekit", description="Focus kind understood by Element clients")
    livekit_service_url: str = Field(..., description="Token endpoint clients call with an OpenID token")


class TransportsResponse(BaseModel):
    transports: list[Transport] = Field(default_factory=list)


class OpenIdToken(BaseModel):
    """OpenID token as returned by ``/user/{userId}/openid/request_token``."""

    model_config = ConfigDict(extra="allow")

    access_token: str = Field(..., min_length=1)
    token_type: str | None = None
    matrix_server_name: str | None = None
    expires_in: int | None = None


class MemberInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    claimed_device_id: str | None = None


class GetTokenRequest(BaseModel):
    """Token request body.

    Element X sends ``room`` and ``device_id``; older clients send ``room_id``
    and nest the device under ``member.claimed_device_id``.
    """

    room: str = Field(..., min_length=1, validation_alias=AliasChoices("room", "room_id"))
    openid_token: OpenIdToken = Field(..., validation_alias=AliasChoices("openid_token", "identity_assertion"))
    device_id: str | None = None
    member: MemberInfo | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_null_aliases(cls, value: object) -> object:
        """A null ``room`` or ``openid_token`` defers to the other field name."""

        if isinstance(value, dict):
            return {
                key: item
                for key, item in value.items()
                if not (key in {"room", "openid_token"} and item is None)
            }
        return value

    @property
    def candidate_device_id(self) -> str | None:
        if self.device_id is not None:
            return self.device_id
        if self.member is not None:
            return self.member.claimed_device_id
        return None


class TokenResponse(BaseModel):
    access_token: str = Field(..., description="RealtimeKit participant token for the call SDK")


class ErrorResponse(BaseModel):
    errcode: str
    error: str
