from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.procedures import ProcedureRouter
from taskboard.repositories.task import TaskRepository
from taskboard.schemas.common import IdInput
from taskboard.schemas.relations import CommentDetail, TaskDetail
from taskboard.schemas.task import (
    CommentCreate,
    TaskCreate,
    TaskPriorityFilter,
    TaskRead,
    TaskStatusFilter,
    TaskStatusUpdate,
    TaskTeamFilter,
    TaskUpdate,
)

router = ProcedureRouter("task")


# PUBLIC_INTERFACE
@router.query("getTasks", output=List[TaskDetail])
async def get_tasks(session: AsyncSession, _: None):
    """List tasks with creator, team, assignees, tags and comments."""
    return await TaskRepository(session).list_tasks()


# PUBLIC_INTERFACE
@router.query("getTaskById", input=IdInput, output=TaskDetail)
async def get_task_by_id(session: AsyncSession, payload: IdInput):
    return await TaskRepository(session).get_task(payload.id)


# PUBLIC_INTERFACE
@router.mutation("createTask", input=TaskCreate, output=TaskDetail)
async def create_task(session: AsyncSession, payload: TaskCreate):
    """
    Create a task. Status defaults to PENDING and priority to MEDIUM;
    assigneeIds/tagIds connect existing users/tags.
    """
    return await TaskRepository(session).create_task(payload)


# PUBLIC_INTERFACE
@router.mutation("updateTask", input=TaskUpdate, output=TaskDetail)
async def update_task(session: AsyncSession, payload: TaskUpdate):
    """Partial update; assigneeIds/tagIds replace the whole set when given."""
    return await TaskRepository(session).update_task(payload)


# PUBLIC_INTERFACE
@router.mutation("deleteTask", input=IdInput, output=TaskRead)
async def delete_task(session: AsyncSession, payload: IdInput):
    return await TaskRepository(session).delete_task(payload.id)


# PUBLIC_INTERFACE
@router.mutation("updateTaskStatus", input=TaskStatusUpdate, output=TaskDetail)
async def update_task_status(session: AsyncSession, payload: TaskStatusUpdate):
    return await TaskRepository(session).update_status(payload.id, payload.status)


# PUBLIC_INTERFACE
@router.mutation("addComment", input=CommentCreate, output=CommentDetail)
async def add_comment(session: AsyncSession, payload: CommentCreate):
    return await TaskRepository(session).add_comment(payload)


# PUBLIC_INTERFACE
@router.query("getTaskComments", input=IdInput, output=List[CommentDetail])
async def get_task_comments(session: AsyncSession, payload: IdInput):
    """Comments on a task, most recent first."""
    return await TaskRepository(session).list_comments(payload.id)


# PUBLIC_INTERFACE
@router.query("getTasksByStatus", input=TaskStatusFilter, output=List[TaskDetail])
async def get_tasks_by_status(session: AsyncSession, payload: TaskStatusFilter):
    return await TaskRepository(session).list_by_status(payload.status)


# PUBLIC_INTERFACE
@router.query("getTasksByPriority", input=TaskPriorityFilter, output=List[TaskDetail])
async def get_tasks_by_priority(session: AsyncSession, payload: TaskPriorityFilter):
    return await TaskRepository(session).list_by_priority(payload.priority)


# PUBLIC_INTERFACE
@router.query("getTasksByTeam", input=TaskTeamFilter, output=List[TaskDetail])
async def get_tasks_by_team(session: AsyncSession, payload: TaskTeamFilter):
    return await TaskRepository(session).list_by_team(payload.team_id)
