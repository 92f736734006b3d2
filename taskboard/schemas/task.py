from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from taskboard.db.base import as_utc
from taskboard.db.models.task import TaskPriority, TaskStatus
from .common import ApiModel, EntityId, RelationIdsModel, reject_explicit_nulls


class TaskRead(ApiModel):
    """Task read model without relations."""
    id: int = Field(..., description="Task ID")
    title: str = Field(..., description="Title")
    description: Optional[str] = Field(None)
    status: TaskStatus = Field(..., description="Workflow status")
    priority: TaskPriority = Field(..., description="Priority")
    deadline: Optional[datetime] = Field(None)
    created_by_id: int = Field(..., description="Creator user id")
    team_id: int = Field(..., description="Owning team id")
    created_at: datetime = Field(..., description="Created timestamp")
    updated_at: datetime = Field(..., description="Updated timestamp")


class TaskCreate(RelationIdsModel):
    """createTask payload."""
    title: str = Field(..., min_length=1, description="Title")
    description: Optional[str] = Field(None)
    status: TaskStatus = Field(TaskStatus.PENDING)
    priority: TaskPriority = Field(TaskPriority.MEDIUM)
    deadline: Optional[datetime] = Field(None)
    created_by_id: EntityId = Field(..., description="Creator user id (must exist)")
    team_id: EntityId = Field(..., description="Owning team id (must exist)")
    assignee_ids: Optional[List[EntityId]] = Field(None, description="Users to connect as assignees")
    tag_ids: Optional[List[EntityId]] = Field(None, description="Tags to connect")

    @field_validator("deadline")
    @classmethod
    def _deadline_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class TaskUpdate(RelationIdsModel):
    """
    updateTask payload.

    Only supplied fields change. ``assigneeIds`` / ``tagIds`` replace the whole
    relation set when present; an empty list clears it.
    """
    id: EntityId = Field(..., description="Task ID")
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None)
    status: Optional[TaskStatus] = Field(None)
    priority: Optional[TaskPriority] = Field(None)
    deadline: Optional[datetime] = Field(None)
    created_by_id: Optional[EntityId] = Field(None)
    team_id: Optional[EntityId] = Field(None)
    assignee_ids: Optional[List[EntityId]] = Field(None)
    tag_ids: Optional[List[EntityId]] = Field(None)

    @field_validator("deadline")
    @classmethod
    def _deadline_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @model_validator(mode="before")
    @classmethod
    def _required_columns_not_null(cls, values):
        return reject_explicit_nulls(values, ("title", "status", "priority", "created_by_id", "team_id"))


class TaskStatusUpdate(ApiModel):
    """updateTaskStatus payload. Any status may follow any other."""
    id: EntityId = Field(..., description="Task ID")
    status: TaskStatus = Field(..., description="New status")


class TaskStatusFilter(ApiModel):
    status: TaskStatus


class TaskPriorityFilter(ApiModel):
    priority: TaskPriority


class TaskTeamFilter(ApiModel):
    team_id: EntityId


class CommentRead(ApiModel):
    """Comment read model."""
    id: int = Field(..., description="Comment ID")
    task_id: int = Field(..., description="Task ID")
    user_id: int = Field(..., description="Author user id")
    content: str = Field(..., description="Comment body")
    created_at: datetime = Field(..., description="Created timestamp")


class CommentCreate(ApiModel):
    """addComment payload."""
    task_id: EntityId = Field(..., description="Task ID (must exist)")
    user_id: EntityId = Field(..., description="Author user id")
    content: str = Field(..., min_length=1, description="Comment body")
