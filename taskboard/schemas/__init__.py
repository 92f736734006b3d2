"""
Public Pydantic schemas used by procedures, repositories and tests.

Input contracts and flat read models are grouped by entity (user, task, team,
tag); ``relations`` holds the read models with each entity's relation
include-set; ``common`` holds the shared base model and the error envelope.
"""

from .common import ApiModel, ErrorResponse, IdInput, MessageResponse  # noqa: F401
