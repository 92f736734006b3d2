from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Enum, ForeignKey, Integer, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.db.base import Base, IntPkMixin, TimestampMixin, UtcDateTime


class TaskStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    COMPLETED = "COMPLETED"


class TaskPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


def _enum_values(cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in cls]


task_assignees = Table(
    "task_assignees",
    Base.metadata,
    Column("task_id", Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

task_tags = Table(
    "task_tags",
    Base.metadata,
    Column("task_id", Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Task(IntPkMixin, TimestampMixin, Base):
    """Unit of work created by a user, owned by a team, assigned to users and tagged."""
    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(
            TaskStatus,
            name="task_status",
            native_enum=False,
            length=20,
            validate_strings=True,
            values_callable=_enum_values,
        ),
        nullable=False,
        default=TaskStatus.PENDING,
        index=True,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(
            TaskPriority,
            name="task_priority",
            native_enum=False,
            length=20,
            validate_strings=True,
            values_callable=_enum_values,
        ),
        nullable=False,
        default=TaskPriority.MEDIUM,
        index=True,
    )
    deadline: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
    created_by_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    team_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    created_by: Mapped["User"] = relationship(
        "User", foreign_keys=[created_by_id], back_populates="created_tasks"
    )
    team: Mapped["Team"] = relationship("Team", back_populates="tasks")
    assignees: Mapped[list["User"]] = relationship(
        "User",
        secondary=task_assignees,
        back_populates="assigned_tasks",
        order_by="User.id",
    )
    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary=task_tags,
        back_populates="tasks",
        order_by="Tag.id",
    )
    comments: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [Comment.created_at.desc(), Comment.id.desc()],
    )


class Comment(IntPkMixin, TimestampMixin, Base):
    """Immutable note left on a task; deleted together with its task."""
    __tablename__ = "comments"

    task_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    task: Mapped["Task"] = relationship("Task", back_populates="comments")
    user: Mapped["User"] = relationship("User", back_populates="comments")
