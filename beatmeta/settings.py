from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from modules.helperClasses import LookupConfig


def parse_flexible_bool(value: Any) -> bool:
    """Parse boolean from various string formats.

    Accepts: 1, 0, y, yes, n, no, true, false, on, off (case-insensitive)
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("1", "y", "yes", "true", "on"):
            return True
        if normalized in ("0", "n", "no", "false", "off", ""):
            return False
    raise ValueError(f"Cannot parse '{value}' as boolean. Use: 1/0, y/n, yes/no, true/false, on/off")


FlexibleBool = Annotated[bool, BeforeValidator(parse_flexible_bool)]


class BeatmetaSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", populate_by_name=True
    )

    api_url: str = Field(
        default="https://osu.ppy.sh/api/v2", validation_alias="OSU_API_URL"
    )
    access_token: Optional[str] = Field(
        default=None, validation_alias="OSU_ACCESS_TOKEN"
    )
    api_version: str = Field(default="20240529", validation_alias="OSU_API_VERSION")
    user_agent: str = Field(
        default="Beatmeta/1.0", validation_alias="BEATMETA_USER_AGENT"
    )
    request_timeout_seconds: int = Field(
        default=10, validation_alias="REQUEST_TIMEOUT_SECONDS"
    )
    force_offline: FlexibleBool = Field(
        default=False, validation_alias="FORCE_OFFLINE"
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, validation_alias="LOG_FILE")


def build_lookup_config(settings: BeatmetaSettings) -> LookupConfig:
    return LookupConfig(
        api_url=settings.api_url,
        access_token=settings.access_token,
        api_version=settings.api_version,
        user_agent=settings.user_agent,
        request_timeout_seconds=settings.request_timeout_seconds,
        force_offline=settings.force_offline,
    )
