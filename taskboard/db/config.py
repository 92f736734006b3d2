from __future__ import annotations

import re
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Store configuration from the environment (or a .env file).

    DATABASE_URL wins when set; postgresql and sqlite URLs are accepted, with
    or without a driver suffix. Otherwise the URL is assembled from
    POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_DB, POSTGRES_HOST and
    POSTGRES_PORT.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: Optional[str] = Field(default=None, description="Full connection URL")
    POSTGRES_USER: Optional[str] = Field(default=None)
    POSTGRES_PASSWORD: Optional[str] = Field(default=None)
    POSTGRES_DB: Optional[str] = Field(default=None)
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)

    SQL_ECHO: bool = Field(default=False, description="Log every SQL statement")

    @property
    def database_url(self) -> str:
        """Driver-neutral URL of the store."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        missing = [
            name
            for name in ("POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_DB")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(f"Database configuration missing: set DATABASE_URL or {', '.join(missing)}")
        url = URL.create(
            "postgresql",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        )
        return url.render_as_string(hide_password=False)

    @property
    def async_database_url(self) -> str:
        """URL for the asyncio engine (asyncpg or aiosqlite)."""
        return to_async_url(self.database_url)

    @property
    def sync_database_url(self) -> str:
        """Driver-less URL, as written into the Alembic config."""
        return re.sub(r"^(postgresql|sqlite)\+\w+://", r"\1://", self.database_url)


def to_async_url(url: str) -> str:
    """Normalise a postgresql/sqlite URL to its asyncio driver scheme."""
    if url.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
        return url
    if url.startswith("sqlite"):
        return re.sub(r"^sqlite(\+\w+)?://", "sqlite+aiosqlite://", url)
    return re.sub(r"^postgres(ql)?(\+\w+)?://", "postgresql+asyncpg://", url)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    return Settings()
