"""
Database seeding utilities for a small demo board.

Seeds (only when no user exists yet):
- Two users (a lead and a developer)
- One team led by the first user with both as members
- Two tags (bug, feature)
- One task assigned to the developer, tagged "feature", with a comment

Usage:
  python -m taskboard.db.run_migrations upgrade head
  python -m taskboard.db.seed
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.logging import configure_logging
from taskboard.db.models import User
from taskboard.db.session import Database, get_async_session
from taskboard.repositories import TagRepository, TaskRepository, TeamRepository, UserRepository
from taskboard.schemas.tag import TagCreate
from taskboard.schemas.task import CommentCreate, TaskCreate
from taskboard.schemas.team import TeamCreate
from taskboard.schemas.user import UserCreate

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
async def seed_demo(database: Database) -> bool:
    """
    Seed the database with a demo board.

    Returns True when rows were inserted, False when the database already
    held users and was left untouched.
    """
    seeded = False
    async for session in get_async_session(database):
        if await _has_users(session):
            logger.info("Seed skipped: users already present")
        else:
            await _seed_board(session)
            seeded = True
    return seeded


async def _has_users(session: AsyncSession) -> bool:
    res = await session.execute(select(func.count(User.id)))
    return res.scalar_one() > 0


async def _seed_board(session: AsyncSession) -> None:
    users = UserRepository(session)
    lead = await users.create_user(
        UserCreate(email="ada@example.com", name="Ada Lovelace", role="lead", department="Engineering")
    )
    dev = await users.create_user(
        UserCreate(
            email="grace@example.com",
            name="Grace Hopper",
            role="developer",
            department="Engineering",
            preferences={"theme": "dark", "notifications": True},
        )
    )

    team = await TeamRepository(session).create_team(
        TeamCreate(name="Platform", lead_id=lead.id, member_ids=[lead.id, dev.id])
    )

    tags = TagRepository(session)
    await tags.create_tag(TagCreate(name="bug", color="#d73a4a"))
    feature = await tags.create_tag(TagCreate(name="feature", color="#a2eeef"))

    tasks = TaskRepository(session)
    task = await tasks.create_task(
        TaskCreate(
            title="Set up the board",
            description="Create the first columns and invite the team.",
            created_by_id=lead.id,
            team_id=team.id,
            assignee_ids=[dev.id],
            tag_ids=[feature.id],
        )
    )
    await tasks.add_comment(CommentCreate(task_id=task.id, user_id=lead.id, content="Welcome aboard!"))
    logger.info("Seeded demo board: team id=%s task id=%s", team.id, task.id)


async def _main() -> None:
    database = Database.from_settings()
    try:
        await seed_demo(database)
    finally:
        await database.dispose()


if __name__ == "__main__":
    configure_logging("INFO")
    asyncio.run(_main())
