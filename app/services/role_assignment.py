"""Role assignment: which roles a user holds. Writes replace the whole set."""

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from app.core.errors import InvalidInputError, NotFoundError
from app.core.transaction import transaction
from app.models import Role, User, UserRole
from app.schemas.rbac import RoleOut
from app.services.roles import unique_ids

logger = logging.getLogger(__name__)


def _ensure_user(session: Session, user_id: int, for_update: bool = False) -> None:
    query = session.query(User.id).filter(User.id == user_id)
    if for_update:
        query = query.with_for_update()
    if query.first() is None:
        raise NotFoundError(f"User {user_id} not found.")


def get_roles_for_user(session: Session, user_id: int) -> list[RoleOut]:
    """Roles held by the user, ordered by id. Empty list when the user has none."""
    _ensure_user(session, user_id)
    roles = (
        session.query(Role)
        .join(UserRole, UserRole.role_id == Role.id)
        .filter(UserRole.user_id == user_id)
        .order_by(Role.id)
        .all()
    )
    return [RoleOut.model_validate(r) for r in roles]


def set_user_roles(session: Session, user_id: int, role_ids: Iterable[int]) -> list[int]:
    """
    Replace the user's role set with exactly role_ids.

    The user row is locked for the duration so concurrent replacements
    serialize; unknown role ids abort before anything is written.
    """
    role_ids = unique_ids(role_ids)
    with transaction(session):
        _ensure_user(session, user_id, for_update=True)
        known = {rid for (rid,) in session.query(Role.id).filter(Role.id.in_(role_ids))}
        for role_id in role_ids:
            if role_id not in known:
                raise InvalidInputError(f"Unknown role id {role_id}.")

        session.query(UserRole).filter(UserRole.user_id == user_id).delete()
        session.add_all(UserRole(user_id=user_id, role_id=rid) for rid in role_ids)

    logger.info("Replaced roles of user id=%s: role_ids=%s", user_id, role_ids)
    return role_ids
