"""Role-permission graph: roles, menus, buttons and the menu/button grants attached to roles."""

import logging
from collections.abc import Iterable

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, InvalidInputError, NotFoundError
from app.core.transaction import transaction
from app.models import Button, Menu, Role, RoleButton, RoleMenu, UserRole
from app.schemas.rbac import (
    ButtonCreate,
    ButtonOut,
    MenuCreate,
    MenuOut,
    RoleCreate,
    RoleOut,
    RolePermissionsResponse,
)

logger = logging.getLogger(__name__)


def unique_ids(ids: Iterable[int]) -> list[int]:
    """Drop repeated ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))


def _load_role(session: Session, role_id: int, for_update: bool = False) -> Role:
    query = session.query(Role).filter(Role.id == role_id)
    if for_update:
        query = query.with_for_update()
    role = query.first()
    if role is None:
        raise NotFoundError(f"Role {role_id} not found.")
    return role


def _ensure_menu(session: Session, menu_id: int) -> None:
    if session.query(Menu.id).filter(Menu.id == menu_id).first() is None:
        raise NotFoundError(f"Menu {menu_id} not found.")


# --- roles ---


def create_role(session: Session, data: RoleCreate) -> RoleOut:
    name = data.name.strip()
    if not name:
        raise InvalidInputError("Role name is required.")
    if session.query(Role.id).filter(Role.name == name).first() is not None:
        raise ConflictError(f"Role '{name}' already exists.")
    role = Role(name=name, description=data.description)
    try:
        with transaction(session):
            session.add(role)
    except IntegrityError as e:
        raise ConflictError(f"Role '{name}' already exists.") from e
    logger.info("Created role id=%s name=%s", role.id, name)
    return RoleOut.model_validate(role)


def get_role(session: Session, role_id: int) -> RoleOut:
    return RoleOut.model_validate(_load_role(session, role_id))


def list_roles(session: Session) -> list[RoleOut]:
    return [RoleOut.model_validate(r) for r in session.query(Role).order_by(Role.id).all()]


def delete_role(session: Session, role_id: int) -> None:
    """Delete a role, its user assignments and its menu/button grants."""
    with transaction(session):
        role = _load_role(session, role_id, for_update=True)
        for model in (UserRole, RoleMenu, RoleButton):
            session.query(model).filter(model.role_id == role_id).delete(synchronize_session=False)
        session.delete(role)
    logger.info("Deleted role id=%s", role_id)


# --- menus and buttons ---


def create_menu(session: Session, data: MenuCreate) -> MenuOut:
    """Create a menu. A parent, when given, must already exist (so the tree has no cycles)."""
    if data.parent_id is not None and (
        session.query(Menu.id).filter(Menu.id == data.parent_id).first() is None
    ):
        raise InvalidInputError(f"Unknown parent menu id {data.parent_id}.")
    menu = Menu(**data.model_dump())
    with transaction(session):
        session.add(menu)
    logger.info("Created menu id=%s name=%s parent_id=%s", menu.id, menu.name, menu.parent_id)
    return MenuOut.model_validate(menu)


def list_menus(session: Session) -> list[MenuOut]:
    menus = session.query(Menu).order_by(Menu.sequence, Menu.id).all()
    return [MenuOut.model_validate(m) for m in menus]


def create_button(session: Session, menu_id: int, data: ButtonCreate) -> ButtonOut:
    _ensure_menu(session, menu_id)
    exists = (
        session.query(Button.id)
        .filter(Button.menu_id == menu_id, Button.code == data.code)
        .first()
    )
    if exists is not None:
        raise ConflictError(f"Menu {menu_id} already has a button with code '{data.code}'.")
    button = Button(menu_id=menu_id, name=data.name, code=data.code)
    try:
        with transaction(session):
            session.add(button)
    except IntegrityError as e:
        raise ConflictError(f"Menu {menu_id} already has a button with code '{data.code}'.") from e
    return ButtonOut.model_validate(button)


def list_buttons(session: Session, menu_id: int) -> list[ButtonOut]:
    _ensure_menu(session, menu_id)
    buttons = session.query(Button).filter(Button.menu_id == menu_id).order_by(Button.id).all()
    return [ButtonOut.model_validate(b) for b in buttons]


# --- grants ---


def get_menus_for_role(session: Session, role_id: int) -> list[MenuOut]:
    _load_role(session, role_id)
    menus = (
        session.query(Menu)
        .join(RoleMenu, RoleMenu.menu_id == Menu.id)
        .filter(RoleMenu.role_id == role_id)
        .order_by(Menu.sequence, Menu.id)
        .all()
    )
    return [MenuOut.model_validate(m) for m in menus]


def get_buttons_for_role_and_menu(session: Session, role_id: int, menu_id: int) -> list[ButtonOut]:
    """Buttons of menu_id granted to the role; empty unless the role also grants the menu."""
    _load_role(session, role_id)
    buttons = (
        session.query(Button)
        .join(RoleButton, RoleButton.button_id == Button.id)
        .join(
            RoleMenu,
            and_(RoleMenu.role_id == RoleButton.role_id, RoleMenu.menu_id == Button.menu_id),
        )
        .filter(RoleButton.role_id == role_id, Button.menu_id == menu_id)
        .order_by(Button.id)
        .all()
    )
    return [ButtonOut.model_validate(b) for b in buttons]


def set_role_permissions(
    session: Session,
    role_id: int,
    menu_ids: Iterable[int],
    button_ids: Iterable[int],
) -> RolePermissionsResponse:
    """
    Replace the role's menu and button grants with exactly the given sets.

    Every id is validated before anything is written; a button is only
    grantable together with its own menu. All-or-nothing.
    """
    menu_ids = unique_ids(menu_ids)
    button_ids = unique_ids(button_ids)

    with transaction(session):
        _load_role(session, role_id, for_update=True)

        known_menus = {
            mid for (mid,) in session.query(Menu.id).filter(Menu.id.in_(menu_ids))
        }
        for menu_id in menu_ids:
            if menu_id not in known_menus:
                raise InvalidInputError(f"Unknown menu id {menu_id}.")

        button_menus = dict(
            session.query(Button.id, Button.menu_id).filter(Button.id.in_(button_ids)).all()
        )
        for button_id in button_ids:
            if button_id not in button_menus:
                raise InvalidInputError(f"Unknown button id {button_id}.")
            if button_menus[button_id] not in known_menus:
                raise InvalidInputError(
                    f"Button {button_id} belongs to menu {button_menus[button_id]}, "
                    "which is not granted to this role."
                )

        session.query(RoleMenu).filter(RoleMenu.role_id == role_id).delete()
        session.query(RoleButton).filter(RoleButton.role_id == role_id).delete()
        session.add_all(RoleMenu(role_id=role_id, menu_id=mid) for mid in menu_ids)
        session.add_all(RoleButton(role_id=role_id, button_id=bid) for bid in button_ids)

    logger.info(
        "Replaced permissions of role id=%s: menus=%s, buttons=%s",
        role_id,
        len(menu_ids),
        len(button_ids),
    )
    return RolePermissionsResponse(role_id=role_id, menu_ids=menu_ids, button_ids=button_ids)
