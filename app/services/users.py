"""User directory: account lifecycle and self-service password change."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidCredentialError,
    InvalidInputError,
    NotFoundError,
)
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
    normalize_username,
    verify_password,
)
from app.core.transaction import transaction
from app.models import User, UserRole
from app.models.user import USER_STATUS_DISABLED
from app.schemas.user import PasswordChange, UserCreate, UserOut, UserUpdate
from app.services.sessions import revoke_user_sessions

logger = logging.getLogger(__name__)

# The only columns update_user may write. username and password_hash are never here.
MUTABLE_PROFILE_FIELDS = {"email", "status", "description"}


def _validate_username(username: str) -> None:
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise InvalidInputError("Invalid username length.")


def _validate_password(password: str) -> None:
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise InvalidInputError(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters."
        )


def _load_user(session: Session, user_id: int, for_update: bool = False) -> User:
    query = session.query(User).filter(User.id == user_id)
    if for_update:
        query = query.with_for_update()
    user = query.first()
    if user is None:
        raise NotFoundError(f"User {user_id} not found.")
    return user


def create_user(session: Session, data: UserCreate) -> UserOut:
    """Create a user with a hashed initial password. Rejects duplicate usernames."""
    username = normalize_username(data.username)
    if not username:
        raise InvalidInputError("username is required.")
    if not data.password:
        raise InvalidInputError("password is required.")
    _validate_username(username)
    _validate_password(data.password)

    if session.query(User.id).filter(User.username == username).first() is not None:
        raise ConflictError(f"User '{username}' already exists.")

    user = User(
        username=username,
        password_hash=hash_password(data.password),
        email=data.email,
        status=data.status,
        description=data.description,
    )
    try:
        with transaction(session):
            session.add(user)
    except IntegrityError as e:
        # Lost a race with a concurrent create of the same username.
        raise ConflictError(f"User '{username}' already exists.") from e
    logger.info("Created user id=%s username=%s", user.id, username)
    return UserOut.model_validate(user)


def update_user(session: Session, user_id: int, data: UserUpdate) -> UserOut:
    """Update profile fields only; username and credential are not reachable from here."""
    with transaction(session):
        user = _load_user(session, user_id, for_update=True)
        if data.resource_version is not None and data.resource_version != user.resource_version:
            raise ConflictError(
                f"User {user_id} was modified concurrently "
                f"(expected version {data.resource_version}, found {user.resource_version})."
            )
        changes = data.model_dump(include=MUTABLE_PROFILE_FIELDS, exclude_unset=True, exclude_none=True)
        disabling = (
            changes.get("status") == USER_STATUS_DISABLED and user.status != USER_STATUS_DISABLED
        )
        for field, value in changes.items():
            setattr(user, field, value)
        user.resource_version = user.resource_version + 1
        # A disabled account keeps no live tokens.
        sessions_revoked = revoke_user_sessions(session, user_id) if disabling else 0
    logger.info(
        "Updated user id=%s fields=%s sessions_revoked=%s",
        user_id,
        sorted(changes),
        sessions_revoked,
    )
    return UserOut.model_validate(user)


def delete_user(session: Session, user_id: int) -> None:
    """Delete a user together with their role assignments and sessions."""
    with transaction(session):
        user = _load_user(session, user_id, for_update=True)
        roles_removed = (
            session.query(UserRole)
            .filter(UserRole.user_id == user_id)
            .delete(synchronize_session=False)
        )
        sessions_revoked = revoke_user_sessions(session, user_id)
        session.delete(user)
    logger.info(
        "Deleted user id=%s: roles_removed=%s, sessions_revoked=%s",
        user_id,
        roles_removed,
        sessions_revoked,
    )


def get_user(session: Session, user_id: int) -> UserOut:
    return UserOut.model_validate(_load_user(session, user_id))


def list_users(session: Session) -> list[UserOut]:
    users = session.query(User).order_by(User.id).all()
    return [UserOut.model_validate(u) for u in users]


def change_password(session: Session, requesting_user_id: int, change: PasswordChange) -> None:
    """
    Change the caller's own password.

    Order of checks: caller must be the target (Forbidden), new password must
    match its confirmation and length bounds (InvalidInput), target must exist
    (NotFound), current password must verify (InvalidCredential).
    """
    if requesting_user_id != change.user_id:
        logger.warning(
            "Password change refused: user_id=%s targeted user_id=%s",
            requesting_user_id,
            change.user_id,
        )
        raise ForbiddenError("Users may only change their own password.")
    if change.password != change.confirm_password:
        raise InvalidInputError("New password and confirmation do not match.")
    _validate_password(change.password)

    with transaction(session):
        user = _load_user(session, change.user_id, for_update=True)
        if not verify_password(change.original_password, user.password_hash):
            raise InvalidCredentialError("Current password is incorrect.")
        user.password_hash = hash_password(change.password)
        user.resource_version = user.resource_version + 1
    logger.info("Password changed for user id=%s", change.user_id)
