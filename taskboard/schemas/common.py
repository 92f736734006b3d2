from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, Strict, field_validator
from pydantic.alias_generators import to_camel

# Ids arrive as JSON integers only; "1", 1.5 and true are rejected.
EntityId = Annotated[int, Strict()]


class ApiModel(BaseModel):
    """
    Base for every procedure input and output.

    Wire names are camelCase (``createdById``); snake_case attribute names are
    accepted on input too. Read models load straight from ORM rows.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class IdInput(ApiModel):
    """Input selecting one entity by numeric id."""
    id: EntityId = Field(..., description="Entity id")


class RelationIdsModel(ApiModel):
    """Input carrying relation-id arrays, treated as sets: duplicates are dropped, order kept."""

    @field_validator("assignee_ids", "tag_ids", "member_ids", mode="after", check_fields=False)
    @classmethod
    def _dedupe_ids(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        if v is None:
            return v
        return list(dict.fromkeys(v))


def reject_explicit_nulls(values: Any, fields: tuple[str, ...]) -> Any:
    """
    Raise when a non-nullable column is explicitly sent as null in a partial update.

    Accepts both wire (camelCase) and attribute (snake_case) keys.
    """
    if not isinstance(values, dict):
        return values
    for name in fields:
        for key in (name, to_camel(name)):
            if key in values and values[key] is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
    return values


class MessageResponse(BaseModel):
    """Standard message response."""
    message: str = Field(..., description="Human readable message")
    details: Optional[dict] = Field(default=None, description="Optional extra data")


class ProcedureInfo(BaseModel):
    """One entry of the procedure namespace."""
    name: str = Field(..., description="Procedure name, e.g. getTaskById")
    kind: str = Field(..., description="query or mutation")


class ErrorInfo(BaseModel):
    """Structured error description."""
    type: str = Field(..., description="Machine-readable error type code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(default=None, description="Optional error details (e.g., offending fields)")


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Standardized API error envelope returned by exception handlers."""
    status: int = Field(..., description="HTTP status code")
    error: ErrorInfo = Field(..., description="Error details")
    correlation_id: Optional[str] = Field(default=None, description="Request correlation ID")
    procedure: Optional[str] = Field(default=None, description="Procedure name (if resolved)")
    path: Optional[str] = Field(default=None, description="Request path")
    method: Optional[str] = Field(default=None, description="HTTP method")
    timestamp: datetime = Field(..., description="Error timestamp (UTC)")
