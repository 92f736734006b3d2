from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.procedures import ProcedureRouter
from taskboard.repositories.team import TeamRepository
from taskboard.schemas.common import IdInput
from taskboard.schemas.relations import TeamDetail
from taskboard.schemas.team import TeamCreate, TeamMemberInput, TeamRead, TeamUpdate

router = ProcedureRouter("team")


# PUBLIC_INTERFACE
@router.query("getTeams", output=List[TeamDetail])
async def get_teams(session: AsyncSession, _: None):
    """List teams with lead, members and tasks (with assignees and tags)."""
    return await TeamRepository(session).list_teams()


# PUBLIC_INTERFACE
@router.query("getTeamById", input=IdInput, output=TeamDetail)
async def get_team_by_id(session: AsyncSession, payload: IdInput):
    return await TeamRepository(session).get_team(payload.id)


# PUBLIC_INTERFACE
@router.mutation("createTeam", input=TeamCreate, output=TeamDetail)
async def create_team(session: AsyncSession, payload: TeamCreate):
    return await TeamRepository(session).create_team(payload)


# PUBLIC_INTERFACE
@router.mutation("updateTeam", input=TeamUpdate, output=TeamDetail)
async def update_team(session: AsyncSession, payload: TeamUpdate):
    """Partial update; memberIds replaces the whole member set when given."""
    return await TeamRepository(session).update_team(payload)


# PUBLIC_INTERFACE
@router.mutation("deleteTeam", input=IdInput, output=TeamRead)
async def delete_team(session: AsyncSession, payload: IdInput):
    """Delete a team; blocked while it still owns tasks."""
    return await TeamRepository(session).delete_team(payload.id)


# PUBLIC_INTERFACE
@router.mutation("addTeamMember", input=TeamMemberInput, output=TeamDetail)
async def add_team_member(session: AsyncSession, payload: TeamMemberInput):
    return await TeamRepository(session).add_member(payload.team_id, payload.user_id)


# PUBLIC_INTERFACE
@router.mutation("removeTeamMember", input=TeamMemberInput, output=TeamDetail)
async def remove_team_member(session: AsyncSession, payload: TeamMemberInput):
    return await TeamRepository(session).remove_member(payload.team_id, payload.user_id)
