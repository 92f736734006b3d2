from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import Executable, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import LoaderOption

from taskboard.core.errors import ConflictError, EntityReferenceError, NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def _is_unique_violation(exc: IntegrityError) -> bool:
    text = str(getattr(exc, "orig", exc)).lower()
    return "unique" in text or "duplicate key" in text


class BaseRepository:
    """
    Shared session helpers for the entity repositories.

    Note:
      A repository works inside the session it was constructed with. Mutating
      helpers commit that session exactly once, so a failed store call leaves
      nothing half-applied.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        return await self.session.execute(statement, params or {})

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Single scalar result, or None when the statement matched nothing."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def count(self, statement: Executable) -> int:
        """Execute a ``select(func.count(...))`` statement and return the integer."""
        result = await self.execute(statement)
        return int(result.scalar_one())

    async def commit(self) -> None:
        """
        Commit current transaction.

        Integrity violations are rolled back and re-raised as domain errors:
        unique violations as ConflictError, anything else (foreign keys,
        NOT NULL) as EntityReferenceError.
        """
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning("Store rejected write: %s", exc.orig)
            if _is_unique_violation(exc):
                raise ConflictError("A record with the same unique value already exists") from exc
            raise EntityReferenceError("Referenced record does not exist or is still referenced") from exc

    async def add(self, entity: Any) -> None:
        self.session.add(entity)

    async def delete(self, entity: Any) -> None:
        await self.session.delete(entity)

    async def fetch_one(
        self, model: Type[ModelT], entity_id: int, options: Sequence[LoaderOption] = ()
    ) -> Optional[ModelT]:
        """
        Load one row by primary key with the given eager-load options.

        ``populate_existing`` refreshes an instance already present in the
        session so relations reflect the last commit.
        """
        stmt = (
            select(model)
            .where(model.id == entity_id)  # type: ignore[attr-defined]
            .options(*options)
            .execution_options(populate_existing=True)
        )
        return await self.scalar_one_or_none(stmt)

    async def require(
        self, model: Type[ModelT], entity_id: int, options: Sequence[LoaderOption] = ()
    ) -> ModelT:
        """Like fetch_one, but a missing row raises NotFoundError."""
        row = await self.fetch_one(model, entity_id, options)
        if row is None:
            raise NotFoundError(model.__name__, entity_id)
        return row

    async def ensure_exists(self, model: Type[ModelT], entity_id: int, field: str) -> None:
        """Raise EntityReferenceError when ``entity_id`` names no row of ``model``."""
        stmt = select(func.count()).select_from(model).where(model.id == entity_id)  # type: ignore[attr-defined]
        if await self.count(stmt) == 0:
            raise EntityReferenceError(
                f"{model.__name__} {entity_id} referenced by {field} does not exist",
                field=field,
                ids=[entity_id],
            )

    async def fetch_by_ids(self, model: Type[ModelT], ids: Sequence[int], field: str) -> List[ModelT]:
        """
        Load every row named in ``ids`` (in the given order) for a relation connect/set.

        Raises EntityReferenceError listing the ids that do not exist.
        """
        if not ids:
            return []
        stmt = select(model).where(model.id.in_(ids))  # type: ignore[attr-defined]
        rows = {row.id: row for row in await self.scalars(stmt)}
        missing = [i for i in ids if i not in rows]
        if missing:
            raise EntityReferenceError(
                f"{field} references unknown {model.__name__} ids: {missing}",
                field=field,
                ids=missing,
            )
        return [rows[i] for i in ids]
