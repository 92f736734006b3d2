"""
Read models carrying each entity's relation include-set.

The repositories eager-load exactly these relations, so serialising one of
these models never triggers a lazy load.
"""
from __future__ import annotations

from typing import List

from pydantic import Field

from .tag import TagRead
from .task import CommentRead, TaskRead
from .team import TeamRead
from .user import UserRead


class UserDetail(UserRead):
    """User with assigned/created tasks, teams led and team memberships."""
    assigned_tasks: List[TaskRead] = Field(default_factory=list)
    created_tasks: List[TaskRead] = Field(default_factory=list)
    teams_led: List[TeamRead] = Field(default_factory=list)
    teams: List[TeamRead] = Field(default_factory=list)


class TaskDetail(TaskRead):
    """Task with creator, team, assignees, tags and comments (newest first)."""
    created_by: UserRead
    team: TeamRead
    assignees: List[UserRead] = Field(default_factory=list)
    tags: List[TagRead] = Field(default_factory=list)
    comments: List[CommentRead] = Field(default_factory=list)


class TeamTask(TaskRead):
    """Task as nested in a team: with its assignees and tags."""
    assignees: List[UserRead] = Field(default_factory=list)
    tags: List[TagRead] = Field(default_factory=list)


class TeamDetail(TeamRead):
    """Team with lead, members and owned tasks."""
    lead: UserRead
    members: List[UserRead] = Field(default_factory=list)
    tasks: List[TeamTask] = Field(default_factory=list)


class TagDetail(TagRead):
    """Tag with the tasks carrying it."""
    tasks: List[TaskRead] = Field(default_factory=list)


class CommentDetail(CommentRead):
    """Comment with its task."""
    task: TaskRead
