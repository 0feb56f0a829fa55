"""
Session domain models and schemas.

Request/response schemas for session operations.

Dependencies: pydantic
System role: Session API contracts
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CreateSessionResponse(BaseModel):
    """Response schema for session creation; the id is rendered as a string."""

    userID: str = Field(description="Generated user id")


class UserSummary(BaseModel):
    """One user in an account listing."""

    model_config = ConfigDict(extra="ignore")

    # Whatever the session document holds; merge patches may store any JSON value
    userName: Any = Field(default=None, description="userName from the session document")
    userID: int = Field(description="User id within the account")


class TableLimitsResponse(BaseModel):
    """Provisioned capacity of the session table."""

    readUnits: int
    writeUnits: int
    storageGB: int
