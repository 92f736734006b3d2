"""
Database package initializer exposing key public interfaces for configuration
and the store handle.
"""

from .base import Base
from .config import get_settings, Settings
from .session import Database, get_async_session

# Import models to ensure they are registered with SQLAlchemy metadata
# when the db package is imported.
from . import models as models  # noqa: F401

__all__ = [
    "Base",
    "Settings",
    "get_settings",
    "Database",
    "get_async_session",
    "models",
]
