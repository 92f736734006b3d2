from __future__ import annotations

from typing import Any, Iterable, List, Optional


class TaskboardError(Exception):
    """
    Base class for domain errors surfaced to procedure callers.

    Every subclass carries a machine-readable ``type`` code and optional
    ``details`` so transports can render a structured error envelope.
    """

    type: str = "taskboard_error"

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(TaskboardError):
    """Input failed its declared contract; raised before any store access."""

    type = "validation_error"

    def __init__(self, message: str, fields: Iterable[str] = (), errors: Optional[List[dict]] = None) -> None:
        self.fields = list(fields)
        super().__init__(message, details={"fields": self.fields, "errors": errors or []})


class NotFoundError(TaskboardError):
    """A by-id lookup or mutation target does not exist."""

    type = "not_found"

    def __init__(self, entity: str, entity_id: Any) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found", details={"entity": entity, "id": entity_id})


class EntityReferenceError(TaskboardError):
    """A referenced id does not exist, or a delete would orphan required references."""

    type = "reference_error"

    def __init__(self, message: str, field: Optional[str] = None, ids: Optional[List[Any]] = None) -> None:
        self.field = field
        self.ids = list(ids or [])
        super().__init__(message, details={"field": field, "ids": self.ids})


class ConflictError(TaskboardError):
    """A unique constraint would be violated."""

    type = "conflict"


class StoreError(TaskboardError):
    """The relational store is unreachable or rejected the operation."""

    type = "store_error"

    def __init__(self, message: str = "Store operation failed") -> None:
        super().__init__(message)


class ProcedureNotFoundError(TaskboardError):
    """No procedure is registered under the requested name."""

    type = "procedure_not_found"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown procedure: {name}", details={"procedure": name})
