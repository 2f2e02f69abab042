"""Matrix-style API errors returned by the RTC endpoints."""
from __future__ import annotations


class MatrixError(Exception):
    """Base error rendered as ``{"errcode": ..., "error": ...}``."""

    status_code: int = 500
    errcode: str = "M_UNKNOWN"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.error = message or self.message
        super().__init__(self.error)

    def to_dict(self) -> dict[str, str]:
        return {"errcode": self.errcode, "error": self.error}


class NotConfiguredError(MatrixError):
    status_code = 503
    message = "Voice/video calls not configured on this server"


class InvalidBodyError(MatrixError):
    status_code = 400
    errcode = "M_NOT_JSON"
    message = "Invalid JSON"


class MissingParameterError(MatrixError):
    status_code = 400
    errcode = "M_MISSING_PARAM"
    message = "room and openid_token are required"


class IdentityVerificationFailedError(MatrixError):
    status_code = 403
    errcode = "M_FORBIDDEN"
    message = "OpenID token verification failed"


class NotAMemberError(MatrixError):
    status_code = 403
    errcode = "M_FORBIDDEN"
    message = "User is not a member of this room"


class SessionCreationFailedError(MatrixError):
    status_code = 502
    message = "Failed to create call session"


class SessionJoinFailedError(MatrixError):
    status_code = 502
    message = "Failed to join call session"
