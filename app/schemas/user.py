"""Schemas for user accounts. No response model carries a password or hash."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

UserStatus = Literal["active", "disabled"]


class UserCreate(BaseModel):
    """
    Payload for creating a user. username and password are required; the
    service reports their absence as an invalid-input error rather than
    leaving it to request parsing.
    """

    username: str | None = Field(default=None, description="Unique, immutable login name")
    password: str | None = Field(default=None, description="Initial password (8-128 chars)")
    email: str | None = Field(default=None, max_length=255)
    status: UserStatus = "active"
    description: str = ""


class UserUpdate(BaseModel):
    """
    Mutable profile fields. Unknown keys, including username and password,
    are dropped on parse so they can never reach the update path.
    """

    model_config = ConfigDict(extra="ignore")

    email: str | None = Field(default=None, max_length=255)
    status: UserStatus | None = None
    description: str | None = None
    resource_version: int | None = Field(
        default=None,
        description="When set, the update fails with a conflict unless it matches the stored version",
    )


class UserOut(BaseModel):
    """User as returned to callers (credential never included)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
    status: str
    description: str
    resource_version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UsersListResponse(BaseModel):
    users: list[UserOut]


class PasswordChange(BaseModel):
    """Current password, new password and its confirmation for one target user."""

    user_id: int = Field(..., description="Target user; must equal the authenticated caller")
    original_password: str = Field(..., description="Current password")
    password: str = Field(..., description="New password")
    confirm_password: str = Field(..., description="New password again")


class PasswordChangeBody(BaseModel):
    """HTTP body for a password change; the target user id comes from the URL."""

    original_password: str
    password: str
    confirm_password: str
