"""Pydantic-based configuration helpers for the Slack Redmine bot."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Iterable, List

from pydantic import BaseModel, Field, ValidationError, field_validator


class AppSettings(BaseModel):
    """Settings required to connect to Slack and Redmine."""

    bot_token: str = Field(..., alias="SLACK_AUTH_TOKEN", min_length=1)
    app_token: str = Field(..., alias="SLACK_APP_TOKEN", min_length=1)
    redmine_url: str = Field(..., alias="REDMINE_URL", min_length=1)
    redmine_api_key: str = Field(..., alias="REDMINE_API_TOKEN", min_length=1)
    debug: bool = Field(False, alias="BOT_DEBUG_MODE")
    redmine_timeout: float = Field(10.0, alias="REDMINE_TIMEOUT")
    health_port: int = Field(3000, alias="HEALTH_PORT")

    @field_validator("redmine_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("debug", mode="before")
    @classmethod
    def _parse_debug(cls, value: str | bool | None) -> bool:
        if isinstance(value, bool):
            return value
        # Anything other than "true" keeps debug output off.
        return (value or "").strip().lower() == "true"

    @field_validator("redmine_timeout")
    @classmethod
    def _ensure_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Redmine timeout must be greater than zero")
        return value


# An empty value counts as missing.
_MISSING_ERROR_TYPES = {"missing", "string_too_short"}


def _format_missing(fields: Iterable[str]) -> str:
    """Return a human-friendly comma-separated list of missing env vars."""

    unique: List[str] = []
    for field in fields:
        if field not in unique:
            unique.append(field)
    return ", ".join(unique)


@lru_cache()
def get_settings() -> AppSettings:
    """Fetch and cache settings from environment variables."""

    try:
        return AppSettings.model_validate(os.environ)
    except ValidationError as exc:
        missing = [str(error["loc"][0]) for error in exc.errors() if error["type"] in _MISSING_ERROR_TYPES]
        if not missing:
            raise RuntimeError(f"Invalid configuration: {exc}") from exc
        message = (
            "Missing required environment variables: "
            f"{_format_missing(missing)}"
        )
        raise RuntimeError(message) from exc
