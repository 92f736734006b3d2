from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status

from taskboard.db.session import Database

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def get_database(request: Request) -> Database:
    """
    Return the store handle attached to the application at startup.

    Raises:
        HTTPException: 503 if the application has no database configured yet.
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        logger.error("Request received before the database handle was initialised")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not initialised.",
        )
    return database
