"""ORM model for issued login sessions (one row per bearer token)."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from app.models.base import Base


class AuthSession(Base):
    """
    Server-side record of an issued JWT, keyed by the token's jti.

    A token resolves only while its row exists and expires_at is in the future;
    logout and user deletion delete rows, the cleanup job purges expired ones.
    """

    __tablename__ = "auth_sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    issued_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
