"""Password hashing (credential store) and JWT creation/verification for sessions."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

_dummy_hash: bytes | None = None


def normalize_username(username: str | None) -> str:
    """Usernames are stored and looked up without surrounding whitespace."""
    return (username or "").strip()


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Salted, so equal passwords hash differently."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (constant-time comparison inside bcrypt)."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def burn_password_check(plain_password: str) -> None:
    """Spend one bcrypt verification on a throwaway hash.

    Login calls this for unknown usernames so both failure paths cost the same.
    """
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    bcrypt.checkpw(plain_password.encode("utf-8")[:72], _dummy_hash)


def new_token_id() -> str:
    """Random identifier used as the JWT jti and the auth_sessions primary key."""
    return secrets.token_urlsafe(32)


def create_access_token(sub: str | int, jti: str) -> tuple[str, datetime]:
    """Create a JWT access token with sub (user id), jti, iat and exp. Returns (token, expires_at)."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "jti": jti,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    token = jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )
    return token, expire


def decode_access_token(token: str, verify_exp: bool = True) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, jti, exp, iat).
    Raises jwt.PyJWTError on invalid or (when verify_exp) expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        options={"verify_exp": verify_exp, "require": ["sub", "jti", "exp"]},
    )
