from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.db.base import Base, IntPkMixin, TimestampMixin


team_members = Table(
    "team_members",
    Base.metadata,
    Column("team_id", Integer, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Team(IntPkMixin, TimestampMixin, Base):
    """Group of users with one lead; owns the tasks filed against it."""
    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    lead_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    lead: Mapped["User"] = relationship(
        "User", foreign_keys=[lead_id], back_populates="teams_led"
    )
    members: Mapped[list["User"]] = relationship(
        "User",
        secondary=team_members,
        back_populates="teams",
        order_by="User.id",
    )
    tasks: Mapped[list["Task"]] = relationship(
        "Task",
        back_populates="team",
        order_by="Task.id",
        passive_deletes=True,
    )
