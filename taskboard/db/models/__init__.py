"""
ORM models for users, teams, tasks (with comments) and tags.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

# Re-export commonly used models for convenience and to ensure import side-effects
# register all mapped classes with SQLAlchemy metadata.

from .user import User  # noqa: F401
from .team import Team, team_members  # noqa: F401
from .task import (  # noqa: F401
    Comment,
    Task,
    TaskPriority,
    TaskStatus,
    task_assignees,
    task_tags,
)
from .tag import Tag  # noqa: F401
