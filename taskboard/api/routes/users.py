from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.procedures import ProcedureRouter
from taskboard.repositories.user import UserRepository
from taskboard.schemas.common import IdInput
from taskboard.schemas.relations import TaskDetail, TeamDetail, UserDetail
from taskboard.schemas.user import UserCreate, UserRead, UserUpdate

router = ProcedureRouter("user")


# PUBLIC_INTERFACE
@router.query("getUsers", output=List[UserDetail])
async def get_users(session: AsyncSession, _: None):
    """List users with assigned/created tasks, teams led and memberships."""
    return await UserRepository(session).list_users()


# PUBLIC_INTERFACE
@router.query("getUserById", input=IdInput, output=UserDetail)
async def get_user_by_id(session: AsyncSession, payload: IdInput):
    return await UserRepository(session).get_user(payload.id)


# PUBLIC_INTERFACE
@router.mutation("addUser", input=UserCreate, output=UserDetail)
async def add_user(session: AsyncSession, payload: UserCreate):
    return await UserRepository(session).create_user(payload)


# PUBLIC_INTERFACE
@router.mutation("updateUser", input=UserUpdate, output=UserDetail)
async def update_user(session: AsyncSession, payload: UserUpdate):
    return await UserRepository(session).update_user(payload)


# PUBLIC_INTERFACE
@router.mutation("deleteUser", input=IdInput, output=UserRead)
async def delete_user(session: AsyncSession, payload: IdInput):
    """Delete a user; blocked while they created tasks, lead teams or authored comments."""
    return await UserRepository(session).delete_user(payload.id)


# PUBLIC_INTERFACE
@router.query("getUserTasks", input=IdInput, output=List[TaskDetail])
async def get_user_tasks(session: AsyncSession, payload: IdInput):
    """Tasks the user is assigned to."""
    return await UserRepository(session).list_assigned_tasks(payload.id)


# PUBLIC_INTERFACE
@router.query("getUserTeamsLed", input=IdInput, output=List[TeamDetail])
async def get_user_teams_led(session: AsyncSession, payload: IdInput):
    return await UserRepository(session).list_teams_led(payload.id)


# PUBLIC_INTERFACE
@router.query("getUserTeams", input=IdInput, output=List[TeamDetail])
async def get_user_teams(session: AsyncSession, payload: IdInput):
    """Teams the user is a member of."""
    return await UserRepository(session).list_teams(payload.id)
