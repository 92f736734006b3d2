from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from .common import ApiModel, EntityId, reject_explicit_nulls


class TagRead(ApiModel):
    """Tag read model without relations."""
    id: int = Field(..., description="Tag ID")
    name: str = Field(..., description="Tag name")
    color: Optional[str] = Field(None)
    created_at: datetime = Field(..., description="Created timestamp")
    updated_at: datetime = Field(..., description="Updated timestamp")


class TagCreate(ApiModel):
    """createTag payload."""
    name: str = Field(..., min_length=1, description="Tag name")
    color: Optional[str] = Field(None, description="Display color")


class TagUpdate(ApiModel):
    """updateTag payload."""
    id: EntityId = Field(..., description="Tag ID")
    name: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = Field(None)

    @model_validator(mode="before")
    @classmethod
    def _required_columns_not_null(cls, values):
        return reject_explicit_nulls(values, ("name",))


class TagTasksFilter(ApiModel):
    tag_id: EntityId
