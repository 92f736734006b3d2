from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Union

from pydantic import (
    AnyUrl,
    EmailStr,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from .common import ApiModel, EntityId, reject_explicit_nulls

# Preferences are an open map of scalar values; nested objects are rejected.
PreferenceValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]
Preferences = Dict[str, PreferenceValue]

_url_adapter = TypeAdapter(AnyUrl)


def _check_avatar(v: Optional[str]) -> Optional[str]:
    # Validate the URL shape but keep the caller's exact string.
    if v is None:
        return v
    try:
        _url_adapter.validate_python(v)
    except ValidationError:
        raise ValueError("avatar must be a valid URL")
    return v


class UserRead(ApiModel):
    """User read model without relations."""
    id: int = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    name: str = Field(..., description="Display name")
    role: str = Field(..., description="Free-text role label")
    department: Optional[str] = Field(None)
    avatar: Optional[str] = Field(None)
    preferences: Optional[Preferences] = Field(None)
    created_at: datetime = Field(..., description="Created timestamp")
    updated_at: datetime = Field(..., description="Updated timestamp")


class UserCreate(ApiModel):
    """addUser payload."""
    email: EmailStr = Field(..., description="Email (unique)")
    name: str = Field(..., min_length=2, description="Name, at least 2 characters")
    role: str = Field(..., description="Role label")
    department: Optional[str] = Field(None)
    avatar: Optional[str] = Field(None, description="Avatar URL")
    preferences: Optional[Preferences] = Field(None, description="Open key/value preferences")

    @field_validator("avatar")
    @classmethod
    def _avatar_is_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_avatar(v)


class UserUpdate(ApiModel):
    """updateUser payload: every addUser field optional, plus the target id."""
    id: EntityId = Field(..., description="User ID")
    email: Optional[EmailStr] = Field(None)
    name: Optional[str] = Field(None, min_length=2)
    role: Optional[str] = Field(None)
    department: Optional[str] = Field(None)
    avatar: Optional[str] = Field(None)
    preferences: Optional[Preferences] = Field(None)

    @field_validator("avatar")
    @classmethod
    def _avatar_is_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_avatar(v)

    @model_validator(mode="before")
    @classmethod
    def _required_columns_not_null(cls, values):
        return reject_explicit_nulls(values, ("email", "name", "role"))
