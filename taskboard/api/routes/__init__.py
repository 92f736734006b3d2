"""
Procedure route modules, one per entity.

This package contains sub-routers for:
- user: user lifecycle and relationship navigation
- task: task lifecycle, status changes, comments and filters
- team: team lifecycle and membership editing
- tag: tag lifecycle and tag-to-task filtering

``app_router`` composes them into the single procedure namespace.
"""

from taskboard.api.procedures import ProcedureRouter

from .tags import router as tag_router
from .tasks import router as task_router
from .teams import router as team_router
from .users import router as user_router

app_router = ProcedureRouter("app")
app_router.include_router(user_router)
app_router.include_router(task_router)
app_router.include_router(team_router)
app_router.include_router(tag_router)

__all__ = ["app_router", "user_router", "task_router", "team_router", "tag_router"]
