"""
Permission resolver: a user's effective menus and buttons.

Permissions are the plain union over every role the user holds. There is no
deny and no precedence between roles. Each lookup is a single SELECT, so a
concurrent role or grant replacement is seen entirely or not at all.
"""

from collections.abc import Iterable

from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models import Button, Menu, RoleButton, RoleMenu, User, UserRole
from app.schemas.rbac import ButtonOut, MenuNode


def _ensure_user(session: Session, user_id: int) -> None:
    if session.query(User.id).filter(User.id == user_id).first() is None:
        raise NotFoundError(f"User {user_id} not found.")


def _sort_level(nodes: list[MenuNode]) -> None:
    nodes.sort(key=lambda n: (n.sequence, n.id))
    for node in nodes:
        _sort_level(node.children)


def build_menu_tree(menus: Iterable[Menu]) -> list[MenuNode]:
    """
    Assemble menus into a forest. Duplicates (same id) collapse into one node.
    A menu whose parent is not among the given menus becomes a root.
    """
    nodes: dict[int, MenuNode] = {}
    for menu in menus:
        if menu.id not in nodes:
            nodes[menu.id] = MenuNode.model_validate(menu, from_attributes=True)

    roots: list[MenuNode] = []
    for node in nodes.values():
        parent = nodes.get(node.parent_id) if node.parent_id is not None else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)
    _sort_level(roots)
    return roots


def get_left_menus_for_user(session: Session, user_id: int) -> list[MenuNode]:
    """Menu tree visible to the user: every menu granted by any of their roles."""
    _ensure_user(session, user_id)
    menus = (
        session.query(Menu)
        .join(RoleMenu, RoleMenu.menu_id == Menu.id)
        .join(UserRole, UserRole.role_id == RoleMenu.role_id)
        .filter(UserRole.user_id == user_id)
        .distinct()
        .all()
    )
    return build_menu_tree(menus)


def get_buttons_for_user(session: Session, user_id: int, menu_id: int) -> list[ButtonOut]:
    """
    Buttons on menu_id the user may use: for each of the user's roles that
    grants the menu, the buttons that role grants on it. Empty when no role
    grants the menu.
    """
    _ensure_user(session, user_id)
    buttons = (
        session.query(Button)
        .join(RoleButton, RoleButton.button_id == Button.id)
        .join(UserRole, UserRole.role_id == RoleButton.role_id)
        .join(
            RoleMenu,
            and_(RoleMenu.role_id == RoleButton.role_id, RoleMenu.menu_id == Button.menu_id),
        )
        .filter(UserRole.user_id == user_id, Button.menu_id == menu_id)
        .distinct()
        .order_by(Button.id)
        .all()
    )
    return [ButtonOut.model_validate(b) for b in buttons]
