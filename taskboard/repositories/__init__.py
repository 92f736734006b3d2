"""
Repository layer for data access.

One repository per entity (users, tasks, teams, tags). Repositories encapsulate
the SQLAlchemy queries, the eager-loaded relation include-set of each entity,
and the not-found / reference checks guarding every operation. They work on
the AsyncSession handed to them by the caller (see taskboard.db.Database).
"""

from .tag import TagRepository  # noqa: F401
from .task import TaskRepository  # noqa: F401
from .team import TeamRepository  # noqa: F401
from .user import UserRepository  # noqa: F401
