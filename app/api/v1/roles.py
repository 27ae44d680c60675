"""Role management and role permission grants."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.api.v1.errors import to_http_exception
from app.core.database import get_db
from app.core.errors import ServiceError
from app.schemas.auth import CurrentUser
from app.schemas.rbac import (
    ButtonOut,
    MenuOut,
    RoleCreate,
    RoleOut,
    RolePermissionsResponse,
    RolePermissionsUpdate,
)
from app.services import roles

router = APIRouter()

DbSession = Annotated[Session, Depends(get_db)]
Caller = Annotated[CurrentUser, Depends(get_current_user)]


@router.post("", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def create_role(body: RoleCreate, db: DbSession, _user: Caller) -> RoleOut:
    try:
        return roles.create_role(db, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("", response_model=list[RoleOut])
def list_roles(db: DbSession, _user: Caller) -> list[RoleOut]:
    return roles.list_roles(db)


@router.get("/{role_id}", response_model=RoleOut)
def get_role(role_id: int, db: DbSession, _user: Caller) -> RoleOut:
    try:
        return roles.get_role(db, role_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(role_id: int, db: DbSession, _user: Caller) -> None:
    try:
        roles.delete_role(db, role_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/{role_id}/menus", response_model=list[MenuOut])
def get_role_menus(role_id: int, db: DbSession, _user: Caller) -> list[MenuOut]:
    try:
        return roles.get_menus_for_role(db, role_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/{role_id}/menus/{menu_id}/buttons", response_model=list[ButtonOut])
def get_role_buttons(role_id: int, menu_id: int, db: DbSession, _user: Caller) -> list[ButtonOut]:
    try:
        return roles.get_buttons_for_role_and_menu(db, role_id, menu_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.put("/{role_id}/permissions", response_model=RolePermissionsResponse)
def set_role_permissions(
    role_id: int,
    body: RolePermissionsUpdate,
    db: DbSession,
    _user: Caller,
) -> RolePermissionsResponse:
    """Replace the role's menu and button grants. Either the whole set is stored or nothing is."""
    try:
        return roles.set_role_permissions(db, role_id, body.menu_ids, body.button_ids)
    except ServiceError as e:
        raise to_http_exception(e) from e
