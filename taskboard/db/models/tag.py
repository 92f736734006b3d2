from __future__ import annotations

from typing import Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.db.base import Base, IntPkMixin, TimestampMixin


class Tag(IntPkMixin, TimestampMixin, Base):
    """Label attachable to any number of tasks."""
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    color: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    tasks: Mapped[list["Task"]] = relationship(
        "Task",
        secondary="task_tags",
        back_populates="tags",
        order_by="Task.id",
    )
