"""Session cleanup: delete auth_sessions rows whose token has expired."""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.transaction import transaction
from app.models import AuthSession

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def purge_expired_sessions(session: Session, settings: "Settings") -> int:
    """
    Delete sessions past their expiry. Returns the number of rows deleted.

    Expired tokens already fail to resolve; this only reclaims storage.
    Idempotent: safe to run repeatedly.
    """
    if not settings.SESSION_CLEANUP_ENABLED:
        logger.info("Session cleanup is disabled (SESSION_CLEANUP_ENABLED=false); skipping.")
        return 0

    now = datetime.now(UTC)
    with transaction(session):
        deleted_count = (
            session.query(AuthSession)
            .filter(AuthSession.expires_at <= now)
            .delete(synchronize_session=False)
        )

    if deleted_count > 0:
        logger.info(
            "Session cleanup run: now=%s, sessions_deleted=%s",
            now.isoformat(),
            deleted_count,
        )
    return deleted_count


def count_sessions(session: Session) -> tuple[int, int]:
    """Return (live, expired) session counts as of now."""
    now = datetime.now(UTC)
    live = session.query(AuthSession.id).filter(AuthSession.expires_at > now).count()
    expired = session.query(AuthSession.id).filter(AuthSession.expires_at <= now).count()
    return live, expired
