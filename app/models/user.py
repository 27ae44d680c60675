"""ORM model for application users (identity and credential)."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from app.models.base import Base

USER_STATUS_ACTIVE = "active"
USER_STATUS_DISABLED = "disabled"


class User(Base):
    """
    User account. Roles are attached through user_roles, never stored here.

    username is immutable after creation; password_hash is only ever read by
    the credential check and never leaves the service layer.
    """

    __tablename__ = "users"
    # Ids are never reused after deletion (SQLite needs AUTOINCREMENT for that).
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default=USER_STATUS_ACTIVE)
    description = Column(Text, nullable=False, default="")
    resource_version = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
