"""
Procedure router: named, typed remote procedures over the repositories.

A procedure is either a *query* (read-only) or a *mutation* (changes stored
state). Each declares an input contract and an output shape; the router
validates input before touching the store, runs the handler inside one
session, and serialises the result to camelCase JSON-ready data.

Usage:
    router = ProcedureRouter("task")

    @router.query("getTaskById", input=IdInput, output=TaskDetail)
    async def get_task_by_id(session, payload):
        return await TaskRepository(session).get_task(payload.id)

    data = await app_router.call(database, "getTaskById", {"id": 1})
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import pydantic
from pydantic import TypeAdapter
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import ProcedureNotFoundError, StoreError, ValidationError
from taskboard.core.logging import procedure_var
from taskboard.db.session import Database

logger = logging.getLogger(__name__)

Handler = Callable[[AsyncSession, Any], Awaitable[Any]]


class ProcedureKind(str, enum.Enum):
    QUERY = "query"
    MUTATION = "mutation"


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "input"


@dataclass(frozen=True)
class Procedure:
    """One registered procedure."""
    name: str
    kind: ProcedureKind
    handler: Handler
    input_adapter: Optional[TypeAdapter]
    output_adapter: TypeAdapter

    def parse_input(self, raw: Any) -> Any:
        """
        Validate raw JSON-shaped input against the declared contract.

        Procedures without an input accept ``None`` or an empty object.
        """
        if self.input_adapter is None:
            if raw not in (None, {}):
                raise ValidationError(f"{self.name} takes no input", fields=["input"])
            return None
        try:
            return self.input_adapter.validate_python({} if raw is None else raw)
        except pydantic.ValidationError as exc:
            errors = exc.errors(include_url=False, include_context=False)
            fields = list(dict.fromkeys(_field_path(err["loc"]) for err in errors))
            raise ValidationError(
                f"Invalid input for {self.name}: {', '.join(fields)}",
                fields=fields,
                errors=[{"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in errors],
            ) from exc

    def serialize(self, result: Any) -> Any:
        value = self.output_adapter.validate_python(result, from_attributes=True)
        return self.output_adapter.dump_python(value, mode="json", by_alias=True)


class ProcedureRouter:
    """Registry of procedures, composable into one namespace."""

    def __init__(self, name: str = "app") -> None:
        self.name = name
        self._procedures: Dict[str, Procedure] = {}

    def _register(self, name: str, kind: ProcedureKind, input: Any, output: Any) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            if name in self._procedures:
                raise ValueError(f"Procedure {name!r} already registered on router {self.name!r}")
            self._procedures[name] = Procedure(
                name=name,
                kind=kind,
                handler=handler,
                input_adapter=TypeAdapter(input) if input is not None else None,
                output_adapter=TypeAdapter(output),
            )
            return handler

        return decorator

    # PUBLIC_INTERFACE
    def query(self, name: str, *, input: Any = None, output: Any) -> Callable[[Handler], Handler]:
        """Register a read-only procedure."""
        return self._register(name, ProcedureKind.QUERY, input, output)

    # PUBLIC_INTERFACE
    def mutation(self, name: str, *, input: Any = None, output: Any) -> Callable[[Handler], Handler]:
        """Register a procedure that changes stored state."""
        return self._register(name, ProcedureKind.MUTATION, input, output)

    # PUBLIC_INTERFACE
    def include_router(self, other: "ProcedureRouter") -> None:
        """Merge another router's procedures into this namespace."""
        clashes = set(self._procedures) & set(other._procedures)
        if clashes:
            raise ValueError(f"Duplicate procedure names: {sorted(clashes)}")
        self._procedures.update(other._procedures)

    def get(self, name: str) -> Procedure:
        try:
            return self._procedures[name]
        except KeyError:
            raise ProcedureNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._procedures

    def describe(self) -> List[dict]:
        """Name and kind of every procedure, sorted by name."""
        return [
            {"name": p.name, "kind": p.kind.value}
            for p in sorted(self._procedures.values(), key=lambda p: p.name)
        ]

    # PUBLIC_INTERFACE
    async def call(self, database: Database, name: str, raw_input: Any = None) -> Any:
        """
        Invoke procedure ``name`` with JSON-shaped input.

        Returns the serialised result. Raises ProcedureNotFoundError,
        ValidationError (before any store access), NotFoundError,
        EntityReferenceError, ConflictError, or StoreError.
        """
        procedure = self.get(name)
        token = procedure_var.set(name)
        try:
            payload = procedure.parse_input(raw_input)
            logger.debug("Invoking %s %s", procedure.kind.value, name)
            async with database.session() as session:
                try:
                    result = await procedure.handler(session, payload)
                    return procedure.serialize(result)
                except SQLAlchemyError as exc:
                    logger.exception("Store failure in %s", name)
                    raise StoreError(f"Store failure in {name}") from exc
        finally:
            procedure_var.reset(token)
