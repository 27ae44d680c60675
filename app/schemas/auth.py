"""Request/response schemas for login, logout and the authenticated caller."""

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_at: datetime = Field(..., description="UTC instant after which the token no longer resolves")


class CurrentUser(BaseModel):
    """Authenticated caller (id, username) for dependency injection."""

    id: int
    username: str

    class Config:
        from_attributes = True
