"""Pydantic request/response schemas."""

from app.schemas.auth import CurrentUser, LoginRequest, TokenResponse
from app.schemas.rbac import (
    ButtonCreate,
    ButtonOut,
    MenuCreate,
    MenuNode,
    MenuOut,
    RoleCreate,
    RoleOut,
    RolePermissionsResponse,
    RolePermissionsUpdate,
    UserRolesResponse,
    UserRolesUpdate,
)
from app.schemas.user import (
    PasswordChange,
    PasswordChangeBody,
    UserCreate,
    UserOut,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "ButtonCreate",
    "ButtonOut",
    "CurrentUser",
    "LoginRequest",
    "MenuCreate",
    "MenuNode",
    "MenuOut",
    "PasswordChange",
    "PasswordChangeBody",
    "RoleCreate",
    "RoleOut",
    "RolePermissionsResponse",
    "RolePermissionsUpdate",
    "TokenResponse",
    "UserCreate",
    "UserOut",
    "UserRolesResponse",
    "UserRolesUpdate",
    "UsersListResponse",
    "UserUpdate",
]
