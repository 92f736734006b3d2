# tests/conftest.py

from __future__ import annotations

from typing import Any, AsyncIterator

import httpx
import pytest

from taskboard.api.main import create_app
from taskboard.api.routes import app_router
from taskboard.core.settings import AppSettings
from taskboard.db.session import Database


@pytest.fixture()
async def database() -> AsyncIterator[Database]:
    """
    Fresh in-memory SQLite store per test, schema created from the ORM models.

    Foreign keys are enforced (PRAGMA foreign_keys=ON), so reference checks
    behave as they do on PostgreSQL.
    """
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture()
def call(database: Database):
    """Invoke a procedure by name against the test store: ``await call("getTasks")``."""

    async def _call(name: str, payload: Any = None) -> Any:
        return await app_router.call(database, name, payload)

    return _call


@pytest.fixture()
async def client(database: Database) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client bound to the ASGI app, sharing the test store."""
    app = create_app(database=database, settings=AppSettings(LOG_LEVEL="WARNING"))
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture()
def board(call):
    """
    Build a small board: ``await board()`` returns the created lead, member,
    team and task (camelCase dicts, as procedures return them).
    """

    async def _board() -> dict:
        lead = await call("addUser", {"email": "lead@example.com", "name": "Lena", "role": "lead"})
        dev = await call("addUser", {"email": "dev@example.com", "name": "Dmitri", "role": "developer"})
        team = await call("createTeam", {"name": "Core", "leadId": lead["id"], "memberIds": [lead["id"]]})
        task = await call(
            "createTask",
            {"title": "Ship it", "createdById": lead["id"], "teamId": team["id"], "assigneeIds": [dev["id"]]},
        )
        return {"lead": lead, "dev": dev, "team": team, "task": task}

    return _board
