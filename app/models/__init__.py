"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.rbac import Button, Menu, Role, RoleButton, RoleMenu, UserRole
from app.models.session import AuthSession
from app.models.user import User

__all__ = [
    "AuthSession",
    "Base",
    "Button",
    "Menu",
    "Role",
    "RoleButton",
    "RoleMenu",
    "User",
    "UserRole",
]
