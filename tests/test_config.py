import pytest

from taskboard.core.settings import AppSettings
from taskboard.db.config import Settings, to_async_url


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgresql://u:p@db:5432/board", "postgresql+asyncpg://u:p@db:5432/board"),
        ("postgres://u:p@db/board", "postgresql+asyncpg://u:p@db/board"),
        ("postgresql+psycopg2://u:p@db/board", "postgresql+asyncpg://u:p@db/board"),
        ("postgresql+asyncpg://u:p@db/board", "postgresql+asyncpg://u:p@db/board"),
        ("sqlite:///./board.db", "sqlite+aiosqlite:///./board.db"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ],
)
def test_to_async_url(url, expected):
    assert to_async_url(url) == expected


def test_settings_builds_url_from_postgres_parts(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = Settings(
        POSTGRES_USER="board",
        POSTGRES_PASSWORD="secret",
        POSTGRES_DB="taskboard",
        POSTGRES_HOST="db",
        POSTGRES_PORT=5433,
    )
    assert settings.database_url == "postgresql://board:secret@db:5433/taskboard"
    assert settings.async_database_url == "postgresql+asyncpg://board:secret@db:5433/taskboard"
    assert settings.sync_database_url == "postgresql://board:secret@db:5433/taskboard"


def test_settings_prefers_database_url(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./local.db")
    settings = Settings()
    assert settings.async_database_url == "sqlite+aiosqlite:///./local.db"
    assert settings.sync_database_url == "sqlite:///./local.db"


def test_settings_without_any_url_fails(monkeypatch):
    for name in ("DATABASE_URL", "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_DB"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    with pytest.raises(ValueError):
        _ = settings.database_url


def test_cors_origins_accept_comma_separated_string():
    settings = AppSettings(CORS_ORIGINS="https://a.example, https://b.example")
    assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]


def test_unknown_environment_keys_are_ignored(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "prod")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    assert not hasattr(AppSettings(), "ENVIRONMENT")
    assert not hasattr(Settings(), "ENVIRONMENT")
