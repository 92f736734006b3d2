from __future__ import annotations

import logging
from typing import Any, List

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from taskboard.db.models import Comment, Tag, Task, TaskPriority, TaskStatus, Team, User
from taskboard.schemas.task import CommentCreate, TaskCreate, TaskUpdate
from .base import BaseRepository

logger = logging.getLogger(__name__)

# Relation include-set attached to every task result.
TASK_INCLUDE = (
    selectinload(Task.created_by),
    selectinload(Task.team),
    selectinload(Task.assignees),
    selectinload(Task.tags),
    selectinload(Task.comments),
)


def task_query(*criteria: Any) -> Select:
    """Select tasks matching ``criteria`` with their include-set, ordered by id."""
    stmt = select(Task).options(*TASK_INCLUDE).execution_options(populate_existing=True)
    if criteria:
        stmt = stmt.where(*criteria)
    return stmt.order_by(Task.id)


class TaskRepository(BaseRepository):
    """Repository for tasks and their comments."""

    async def list_tasks(self, *criteria: Any) -> List[Task]:
        res = await self.scalars(task_query(*criteria))
        return list(res)

    async def get_task(self, task_id: int) -> Task:
        return await self.require(Task, task_id, TASK_INCLUDE)

    async def list_by_status(self, status: TaskStatus) -> List[Task]:
        return await self.list_tasks(Task.status == status)

    async def list_by_priority(self, priority: TaskPriority) -> List[Task]:
        return await self.list_tasks(Task.priority == priority)

    async def list_by_team(self, team_id: int) -> List[Task]:
        return await self.list_tasks(Task.team_id == team_id)

    async def list_by_tag(self, tag_id: int) -> List[Task]:
        return await self.list_tasks(Task.tags.any(Tag.id == tag_id))

    async def list_by_assignee(self, user_id: int) -> List[Task]:
        return await self.list_tasks(Task.assignees.any(User.id == user_id))

    async def create_task(self, payload: TaskCreate) -> Task:
        """
        Insert a task; ``assigneeIds``/``tagIds`` connect existing rows.

        The creator and team must exist, as must every connected id.
        """
        await self.ensure_exists(User, payload.created_by_id, "createdById")
        await self.ensure_exists(Team, payload.team_id, "teamId")
        task = Task(
            title=payload.title,
            description=payload.description,
            status=payload.status,
            priority=payload.priority,
            deadline=payload.deadline,
            created_by_id=payload.created_by_id,
            team_id=payload.team_id,
        )
        if payload.assignee_ids:
            task.assignees = await self.fetch_by_ids(User, payload.assignee_ids, "assigneeIds")
        if payload.tag_ids:
            task.tags = await self.fetch_by_ids(Tag, payload.tag_ids, "tagIds")
        await self.add(task)
        await self.commit()
        logger.info("Created task id=%s team_id=%s", task.id, task.team_id)
        return await self.get_task(task.id)

    async def update_task(self, payload: TaskUpdate) -> Task:
        """
        Apply a partial update. Relation arrays replace the whole set when given.
        """
        task = await self.require(
            Task, payload.id, (selectinload(Task.assignees), selectinload(Task.tags))
        )
        values = payload.model_dump(exclude_unset=True, exclude={"id", "assignee_ids", "tag_ids"})
        if "created_by_id" in values:
            await self.ensure_exists(User, values["created_by_id"], "createdById")
        if "team_id" in values:
            await self.ensure_exists(Team, values["team_id"], "teamId")
        for key, value in values.items():
            setattr(task, key, value)
        if payload.assignee_ids is not None:
            task.assignees = await self.fetch_by_ids(User, payload.assignee_ids, "assigneeIds")
        if payload.tag_ids is not None:
            task.tags = await self.fetch_by_ids(Tag, payload.tag_ids, "tagIds")
        await self.commit()
        logger.info("Updated task id=%s fields=%s", task.id, sorted(payload.model_fields_set - {"id"}))
        return await self.get_task(task.id)

    async def update_status(self, task_id: int, status: TaskStatus) -> Task:
        # No transition guard: any status may follow any other.
        task = await self.require(Task, task_id)
        previous = task.status
        task.status = status
        await self.commit()
        logger.info("Task id=%s status %s -> %s", task_id, previous.value, status.value)
        return await self.get_task(task_id)

    async def delete_task(self, task_id: int) -> Task:
        """Delete a task together with its comments, assignments and taggings."""
        task = await self.get_task(task_id)
        await self.delete(task)
        await self.commit()
        logger.info("Deleted task id=%s", task_id)
        return task

    # Comments
    async def add_comment(self, payload: CommentCreate) -> Comment:
        """
        Insert a comment on an existing task.

        Both the task and the author are looked up before the write, so an
        unknown taskId or userId is an EntityReferenceError naming that field
        rather than a foreign-key failure.
        """
        await self.ensure_exists(Task, payload.task_id, "taskId")
        await self.ensure_exists(User, payload.user_id, "userId")
        comment = Comment(task_id=payload.task_id, user_id=payload.user_id, content=payload.content)
        await self.add(comment)
        await self.commit()
        logger.info("Added comment id=%s to task id=%s", comment.id, payload.task_id)
        return await self.require(Comment, comment.id, (selectinload(Comment.task),))

    async def list_comments(self, task_id: int) -> List[Comment]:
        """Comments on a task, most recent first. A missing task raises NotFoundError."""
        await self.require(Task, task_id)
        stmt = (
            select(Comment)
            .where(Comment.task_id == task_id)
            .options(selectinload(Comment.task))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        res = await self.scalars(stmt)
        return list(res)
