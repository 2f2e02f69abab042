"""MSC4143 RTC transport discovery."""
from __future__ import annotations

from ..core.config import CallConfig
from ..schemas.rtc import Transport, TransportsResponse

TOKEN_ENDPOINT_PATH = "/rtk/get_token"


def token_endpoint_url(server_name: str) -> str:
    return f"https://{server_name}{TOKEN_ENDPOINT_PATH}"


def discover(config: CallConfig | None, server_name: str) -> TransportsResponse:
    """Advertise our token endpoint as a LiveKit-style focus.

    With calls unconfigured the list is empty and clients fall back to
    legacy 1:1 WebRTC.
    """

    if config is None:
        return TransportsResponse(transports=[])
    return TransportsResponse(transports=[Transport(livekit_service_url=token_endpoint_url(server_name))])
