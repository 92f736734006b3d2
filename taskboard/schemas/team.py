from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from .common import ApiModel, EntityId, RelationIdsModel, reject_explicit_nulls


class TeamRead(ApiModel):
    """Team read model without relations."""
    id: int = Field(..., description="Team ID")
    name: str = Field(..., description="Team name")
    lead_id: int = Field(..., description="Lead user id")
    created_at: datetime = Field(..., description="Created timestamp")
    updated_at: datetime = Field(..., description="Updated timestamp")


class TeamCreate(RelationIdsModel):
    """createTeam payload."""
    name: str = Field(..., min_length=1, description="Team name")
    lead_id: EntityId = Field(..., description="Lead user id (must exist)")
    member_ids: Optional[List[EntityId]] = Field(None, description="Users to connect as members")


class TeamUpdate(RelationIdsModel):
    """updateTeam payload; ``memberIds`` replaces the whole member set."""
    id: EntityId = Field(..., description="Team ID")
    name: Optional[str] = Field(None, min_length=1)
    lead_id: Optional[EntityId] = Field(None)
    member_ids: Optional[List[EntityId]] = Field(None)

    @model_validator(mode="before")
    @classmethod
    def _required_columns_not_null(cls, values):
        return reject_explicit_nulls(values, ("name", "lead_id"))


class TeamMemberInput(ApiModel):
    """addTeamMember / removeTeamMember payload."""
    team_id: EntityId = Field(..., description="Team ID")
    user_id: EntityId = Field(..., description="User ID")
