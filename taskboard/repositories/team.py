from __future__ import annotations

import logging
from typing import Any, List

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from taskboard.core.errors import EntityReferenceError
from taskboard.db.models import Task, Team, User
from taskboard.schemas.team import TeamCreate, TeamUpdate
from .base import BaseRepository

logger = logging.getLogger(__name__)

# Relation include-set attached to every team result.
TEAM_INCLUDE = (
    selectinload(Team.lead),
    selectinload(Team.members),
    selectinload(Team.tasks).selectinload(Task.assignees),
    selectinload(Team.tasks).selectinload(Task.tags),
)


class TeamRepository(BaseRepository):
    """Repository for teams and their membership."""

    async def list_teams(self, *criteria: Any) -> List[Team]:
        stmt = select(Team).options(*TEAM_INCLUDE).execution_options(populate_existing=True)
        if criteria:
            stmt = stmt.where(*criteria)
        res = await self.scalars(stmt.order_by(Team.id))
        return list(res)

    async def get_team(self, team_id: int) -> Team:
        return await self.require(Team, team_id, TEAM_INCLUDE)

    async def list_led_by(self, user_id: int) -> List[Team]:
        return await self.list_teams(Team.lead_id == user_id)

    async def list_for_member(self, user_id: int) -> List[Team]:
        return await self.list_teams(Team.members.any(User.id == user_id))

    async def create_team(self, payload: TeamCreate) -> Team:
        await self.ensure_exists(User, payload.lead_id, "leadId")
        team = Team(name=payload.name, lead_id=payload.lead_id)
        if payload.member_ids:
            team.members = await self.fetch_by_ids(User, payload.member_ids, "memberIds")
        await self.add(team)
        await self.commit()
        logger.info("Created team id=%s lead_id=%s", team.id, team.lead_id)
        return await self.get_team(team.id)

    async def update_team(self, payload: TeamUpdate) -> Team:
        team = await self.require(Team, payload.id, (selectinload(Team.members),))
        values = payload.model_dump(exclude_unset=True, exclude={"id", "member_ids"})
        if "lead_id" in values:
            await self.ensure_exists(User, values["lead_id"], "leadId")
        for key, value in values.items():
            setattr(team, key, value)
        if payload.member_ids is not None:
            team.members = await self.fetch_by_ids(User, payload.member_ids, "memberIds")
        await self.commit()
        logger.info("Updated team id=%s fields=%s", team.id, sorted(payload.model_fields_set - {"id"}))
        return await self.get_team(team.id)

    async def delete_team(self, team_id: int) -> Team:
        """
        Delete a team and its memberships.

        A team that still owns tasks cannot be deleted; the tasks must be moved
        or deleted first.
        """
        team = await self.get_team(team_id)
        owned = await self.count(select(func.count(Task.id)).where(Task.team_id == team_id))
        if owned:
            raise EntityReferenceError(
                f"Team {team_id} still owns {owned} task(s)", field="teamId", ids=[team_id]
            )
        await self.delete(team)
        await self.commit()
        logger.info("Deleted team id=%s", team_id)
        return team

    async def _membership_target(self, team_id: int, user_id: int) -> tuple[Team, User]:
        team = await self.fetch_one(Team, team_id, (selectinload(Team.members),))
        if team is None:
            raise EntityReferenceError(f"Team {team_id} does not exist", field="teamId", ids=[team_id])
        (user,) = await self.fetch_by_ids(User, [user_id], "userId")
        return team, user

    async def add_member(self, team_id: int, user_id: int) -> Team:
        team, user = await self._membership_target(team_id, user_id)
        if user not in team.members:
            team.members.append(user)
            await self.commit()
            logger.info("Added user id=%s to team id=%s", user_id, team_id)
        return await self.get_team(team_id)

    async def remove_member(self, team_id: int, user_id: int) -> Team:
        team, user = await self._membership_target(team_id, user_id)
        if user in team.members:
            team.members.remove(user)
            await self.commit()
            logger.info("Removed user id=%s from team id=%s", user_id, team_id)
        return await self.get_team(team_id)
