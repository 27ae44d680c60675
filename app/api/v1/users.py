"""User accounts, password change, role assignment and the caller's menus/buttons."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.api.v1.errors import to_http_exception
from app.core.database import get_db
from app.core.errors import ServiceError
from app.schemas.auth import CurrentUser
from app.schemas.rbac import ButtonOut, MenuNode, UserRolesResponse, UserRolesUpdate
from app.schemas.user import (
    PasswordChange,
    PasswordChangeBody,
    UserCreate,
    UserOut,
    UsersListResponse,
    UserUpdate,
)
from app.services import permissions, role_assignment, users

router = APIRouter()

DbSession = Annotated[Session, Depends(get_db)]
Caller = Annotated[CurrentUser, Depends(get_current_user)]


# /me routes are declared before /{user_id} so they are matched first.
@router.get("/me/menus", response_model=list[MenuNode])
def get_my_menus(db: DbSession, current_user: Caller) -> list[MenuNode]:
    """Left-menu tree for the authenticated caller (union over all of their roles)."""
    try:
        return permissions.get_left_menus_for_user(db, current_user.id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/me/menus/{menu_id}/buttons", response_model=list[ButtonOut])
def get_my_buttons(menu_id: int, db: DbSession, current_user: Caller) -> list[ButtonOut]:
    """Buttons the authenticated caller may use on one menu; empty if the menu is not granted."""
    try:
        return permissions.get_buttons_for_user(db, current_user.id, menu_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, db: DbSession, _user: Caller) -> UserOut:
    try:
        return users.create_user(db, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("", response_model=UsersListResponse)
def list_users(db: DbSession, _user: Caller) -> UsersListResponse:
    return UsersListResponse(users=users.list_users(db))


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: DbSession, _user: Caller) -> UserOut:
    try:
        return users.get_user(db, user_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.put("/{user_id}", response_model=UserOut)
def update_user(user_id: int, body: UserUpdate, db: DbSession, _user: Caller) -> UserOut:
    """Update profile fields. username and password in the body are ignored."""
    try:
        return users.update_user(db, user_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: DbSession, _user: Caller) -> None:
    try:
        users.delete_user(db, user_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.put("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    user_id: int,
    body: PasswordChangeBody,
    db: DbSession,
    current_user: Caller,
) -> None:
    """Change a password. The acting identity comes from the token, the target from the URL."""
    change = PasswordChange(user_id=user_id, **body.model_dump())
    try:
        users.change_password(db, current_user.id, change)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/{user_id}/roles", response_model=UserRolesResponse)
def get_user_roles(user_id: int, db: DbSession, _user: Caller) -> UserRolesResponse:
    try:
        roles = role_assignment.get_roles_for_user(db, user_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return UserRolesResponse(user_id=user_id, role_ids=[r.id for r in roles])


@router.put("/{user_id}/roles", response_model=UserRolesResponse)
def set_user_roles(
    user_id: int,
    body: UserRolesUpdate,
    db: DbSession,
    _user: Caller,
) -> UserRolesResponse:
    """Replace the user's roles with exactly body.role_ids."""
    try:
        role_ids = role_assignment.set_user_roles(db, user_id, body.role_ids)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return UserRolesResponse(user_id=user_id, role_ids=role_ids)
