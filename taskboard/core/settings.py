from __future__ import annotations

import json
import logging
from typing import Annotated, Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Lists read from the environment as "a,b,c" or '["a","b"]'.
EnvList = Annotated[List[str], NoDecode]


class AppSettings(BaseSettings):
    """
    Settings of the procedure service itself.

    Store settings live in taskboard.db.config.Settings.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = Field(default="Taskboard API")
    APP_DESCRIPTION: str = Field(
        default=(
            "Typed query/mutation procedures over users, tasks, teams and tags. "
            "Queries are read-only; mutations create, update or delete stored state."
        )
    )
    APP_VERSION: str = Field(default="0.1.0")

    CORS_ORIGINS: EnvList = Field(default_factory=lambda: ["*"], description="Allowed origins")
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: EnvList = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: EnvList = Field(default_factory=lambda: ["*"])

    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default=False, description="alembic upgrade head at startup")
    AUTO_SEED: bool = Field(default=False, description="Insert the demo board at startup when no user exists")

    LOG_LEVEL: str = Field(default="INFO", description="Root log level name")

    @field_validator("CORS_ORIGINS", "CORS_ALLOW_METHODS", "CORS_ALLOW_HEADERS", mode="before")
    @classmethod
    def _split_list(cls, v: Any) -> List[str]:
        if v is None:
            return ["*"]
        if isinstance(v, str):
            text = v.strip()
            if text.startswith("["):
                return json.loads(text) or ["*"]
            return [p.strip() for p in text.split(",") if p.strip()] or ["*"]
        return list(v) or ["*"]

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """
    Build AppSettings from the environment.

    The app factory keeps the instance it built; nothing caches it globally.
    """
    return AppSettings()
