"""Session issuer: login, logout and bearer-token resolution backed by auth_sessions rows."""

import logging
from datetime import UTC, datetime

import jwt
from sqlalchemy.orm import Session

from app.core.errors import ForbiddenError, InvalidCredentialError, UnauthenticatedError
from app.core.security import (
    burn_password_check,
    create_access_token,
    decode_access_token,
    new_token_id,
    normalize_username,
    verify_password,
)
from app.core.transaction import transaction
from app.models import AuthSession, User
from app.models.user import USER_STATUS_ACTIVE
from app.schemas.auth import TokenResponse

logger = logging.getLogger(__name__)

# Same message for unknown username and wrong password.
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."


def login(session: Session, username: str, password: str) -> TokenResponse:
    """
    Verify credentials and issue a bearer token bound to the user's id.

    Unknown usernames and wrong passwords fail identically; a disabled account
    is only reported once the password has been verified.
    """
    username = normalize_username(username)
    user = session.query(User).filter(User.username == username).first()
    if user is None:
        burn_password_check(password)
        logger.info("Login failed: unknown username")
        raise InvalidCredentialError(INVALID_CREDENTIALS_MESSAGE)
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: bad password for user_id=%s", user.id)
        raise InvalidCredentialError(INVALID_CREDENTIALS_MESSAGE)
    if user.status != USER_STATUS_ACTIVE:
        logger.info("Login refused: user_id=%s is %s", user.id, user.status)
        raise ForbiddenError("Account is disabled.")

    jti = new_token_id()
    token, expires_at = create_access_token(sub=user.id, jti=jti)
    with transaction(session):
        session.add(AuthSession(id=jti, user_id=user.id, expires_at=expires_at))
    logger.info("Login succeeded: user_id=%s", user.id)
    return TokenResponse(access_token=token, token_type="bearer", expires_at=expires_at)


def logout(session: Session, token: str | None) -> None:
    """Invalidate the session behind a token. Unknown, malformed or expired tokens are a no-op."""
    if not token:
        return
    try:
        payload = decode_access_token(token, verify_exp=False)
    except jwt.PyJWTError:
        return
    jti = payload.get("jti")
    if not jti:
        return
    with transaction(session):
        deleted = (
            session.query(AuthSession)
            .filter(AuthSession.id == jti)
            .delete(synchronize_session=False)
        )
    if deleted:
        logger.info("Logout: session revoked for user_id=%s", payload.get("sub"))


def resolve(session: Session, token: str | None) -> int:
    """Return the user id a token is bound to, or raise UnauthenticatedError."""
    if not token:
        raise UnauthenticatedError("Not authenticated.")
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as e:
        raise UnauthenticatedError("Invalid or expired token.") from e
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise UnauthenticatedError("Invalid token payload.") from e

    record = (
        session.query(AuthSession.id)
        .filter(
            AuthSession.id == payload["jti"],
            AuthSession.user_id == user_id,
            AuthSession.expires_at > datetime.now(UTC),
        )
        .first()
    )
    if record is None:
        raise UnauthenticatedError("Session has been revoked or has expired.")
    return user_id


def revoke_user_sessions(session: Session, user_id: int) -> int:
    """Delete every session of a user. Runs inside the caller's transaction; does not commit."""
    return (
        session.query(AuthSession)
        .filter(AuthSession.user_id == user_id)
        .delete(synchronize_session=False)
    )
