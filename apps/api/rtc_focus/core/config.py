"""Application configuration for the RTC focus service."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_PRESET_NAME = "group_call_host"
RTK_MEETING_LIFETIME_SECONDS = 24 * 3600
DEFAULT_RTK_API_BASE = "https://api.cloudflare.com/client/v4"


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    server_name: str = Field(default="localhost", description="Public hostname of this homeserver")
    database_url: str = Field(default="sqlite+aiosqlite:///./homeserver.db")

    cf_account_id: str = Field(default="")
    cf_api_token: str = Field(default="")
    cf_app_id: str = Field(default="")
    rtk_preset_name: str = Field(default=DEFAULT_PRESET_NAME)
    rtk_api_base: str = Field(default=DEFAULT_RTK_API_BASE)

    meeting_cache_ttl_seconds: int = Field(default=23 * 3600, ge=1)
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @model_validator(mode="after")
    def _cache_ttl_below_meeting_lifetime(self) -> "Settings":
        if self.meeting_cache_ttl_seconds >= RTK_MEETING_LIFETIME_SECONDS:
            raise ValueError("meeting_cache_ttl_seconds must be shorter than the RealtimeKit meeting lifetime")
        return self


@dataclass(frozen=True, slots=True)
class CallConfig:
    """Credentials for the hosted RealtimeKit application backing calls."""

    account_id: str
    api_token: str
    app_id: str
    preset_name: str = DEFAULT_PRESET_NAME


def load_call_config(settings: Settings) -> CallConfig | None:
    """Build the call configuration, or ``None`` when calls are not set up."""

    if not (settings.cf_account_id and settings.cf_api_token and settings.cf_app_id):
        return None
    return CallConfig(
        account_id=settings.cf_account_id,
        api_token=settings.cf_api_token,
        app_id=settings.cf_app_id,
        preset_name=settings.rtk_preset_name or DEFAULT_PRESET_NAME,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
