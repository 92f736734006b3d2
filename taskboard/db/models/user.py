from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import JSON, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.db.base import Base, IntPkMixin, TimestampMixin


class User(IntPkMixin, TimestampMixin, Base):
    """Person who creates tasks, is assigned to them, and leads or joins teams."""
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(Text, nullable=False)
    department: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    preferences: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    created_tasks: Mapped[list["Task"]] = relationship(
        "Task",
        foreign_keys="Task.created_by_id",
        back_populates="created_by",
        order_by="Task.id",
        passive_deletes=True,
    )
    assigned_tasks: Mapped[list["Task"]] = relationship(
        "Task",
        secondary="task_assignees",
        back_populates="assignees",
        order_by="Task.id",
    )
    teams_led: Mapped[list["Team"]] = relationship(
        "Team",
        foreign_keys="Team.lead_id",
        back_populates="lead",
        order_by="Team.id",
        passive_deletes=True,
    )
    teams: Mapped[list["Team"]] = relationship(
        "Team",
        secondary="team_members",
        back_populates="members",
        order_by="Team.id",
    )
    comments: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="user",
        passive_deletes=True,
    )
