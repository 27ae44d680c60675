"""Menu and button catalogue."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.api.v1.errors import to_http_exception
from app.core.database import get_db
from app.core.errors import ServiceError
from app.schemas.auth import CurrentUser
from app.schemas.rbac import ButtonCreate, ButtonOut, MenuCreate, MenuOut
from app.services import roles

router = APIRouter()


@router.post("", response_model=MenuOut, status_code=status.HTTP_201_CREATED)
def create_menu(
    body: MenuCreate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MenuOut:
    try:
        return roles.create_menu(db, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("", response_model=list[MenuOut])
def list_menus(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[MenuOut]:
    return roles.list_menus(db)


@router.post("/{menu_id}/buttons", response_model=ButtonOut, status_code=status.HTTP_201_CREATED)
def create_button(
    menu_id: int,
    body: ButtonCreate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ButtonOut:
    try:
        return roles.create_button(db, menu_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/{menu_id}/buttons", response_model=list[ButtonOut])
def list_buttons(
    menu_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[ButtonOut]:
    try:
        return roles.list_buttons(db, menu_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
