"""JWT login/logout and the get_current_user dependency."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.api.v1.errors import to_http_exception
from app.core.database import get_db
from app.core.errors import NotFoundError, ServiceError, UnauthenticatedError
from app.schemas.auth import CurrentUser, LoginRequest, TokenResponse
from app.services import sessions, users

router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        return sessions.login(db, body.username, body.password)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """Revoke the presented token. Always succeeds, even for an already invalid token."""
    sessions.logout(db, credentials.credentials if credentials else None)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require a valid Bearer token and return the current user. Raises 401 otherwise."""
    token = credentials.credentials if credentials else None
    try:
        user_id = sessions.resolve(db, token)
        user = users.get_user(db, user_id)
    except UnauthenticatedError as e:
        raise to_http_exception(e) from e
    except NotFoundError as e:
        # Token outlived its user; deletion normally revokes sessions first.
        raise to_http_exception(UnauthenticatedError("User not found.")) from e
    return CurrentUser(id=user.id, username=user.username)
