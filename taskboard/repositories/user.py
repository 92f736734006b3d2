from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from taskboard.core.errors import ConflictError, EntityReferenceError
from taskboard.db.models import Comment, Task, Team, User
from taskboard.schemas.user import UserCreate, UserUpdate
from .base import BaseRepository
from .task import TaskRepository
from .team import TeamRepository

logger = logging.getLogger(__name__)

# Relation include-set attached to every user result.
USER_INCLUDE = (
    selectinload(User.assigned_tasks),
    selectinload(User.created_tasks),
    selectinload(User.teams_led),
    selectinload(User.teams),
)


class UserRepository(BaseRepository):
    """Repository for users and the tasks/teams they relate to."""

    async def list_users(self) -> List[User]:
        stmt = (
            select(User)
            .options(*USER_INCLUDE)
            .execution_options(populate_existing=True)
            .order_by(User.id)
        )
        res = await self.scalars(stmt)
        return list(res)

    async def get_user(self, user_id: int) -> User:
        return await self.require(User, user_id, USER_INCLUDE)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        return await self.scalar_one_or_none(stmt)

    async def _ensure_email_free(self, email: str, user_id: Optional[int] = None) -> None:
        existing = await self.get_user_by_email(email)
        if existing is not None and existing.id != user_id:
            raise ConflictError("User with this email already exists", details={"field": "email"})

    async def create_user(self, payload: UserCreate) -> User:
        await self._ensure_email_free(payload.email)
        user = User(
            email=payload.email,
            name=payload.name,
            role=payload.role,
            department=payload.department,
            avatar=payload.avatar,
            preferences=payload.preferences,
        )
        await self.add(user)
        await self.commit()
        logger.info("Created user id=%s", user.id)
        return await self.get_user(user.id)

    async def update_user(self, payload: UserUpdate) -> User:
        user = await self.require(User, payload.id)
        values = payload.model_dump(exclude_unset=True, exclude={"id"})
        if "email" in values:
            await self._ensure_email_free(values["email"], user_id=user.id)
        for key, value in values.items():
            setattr(user, key, value)
        await self.commit()
        logger.info("Updated user id=%s fields=%s", user.id, sorted(values))
        return await self.get_user(user.id)

    async def delete_user(self, user_id: int) -> User:
        """
        Delete a user and their assignments and memberships.

        Blocked while the user is the creator of a task, the lead of a team or
        the author of a comment, since those references are required.
        """
        user = await self.get_user(user_id)
        authored = await self.count(select(func.count(Comment.id)).where(Comment.user_id == user_id))
        blockers = {
            "createdTasks": len(user.created_tasks),
            "teamsLed": len(user.teams_led),
            "comments": authored,
        }
        blocking = {k: v for k, v in blockers.items() if v}
        if blocking:
            raise EntityReferenceError(
                f"User {user_id} is still referenced by {blocking}", field="id", ids=[user_id]
            )
        await self.delete(user)
        await self.commit()
        logger.info("Deleted user id=%s", user_id)
        return user

    # Relationship navigation
    async def list_assigned_tasks(self, user_id: int) -> List[Task]:
        return await TaskRepository(self.session).list_by_assignee(user_id)

    async def list_teams_led(self, user_id: int) -> List[Team]:
        return await TeamRepository(self.session).list_led_by(user_id)

    async def list_teams(self, user_id: int) -> List[Team]:
        return await TeamRepository(self.session).list_for_member(user_id)
