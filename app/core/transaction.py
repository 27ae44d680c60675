"""Unit-of-work helper shared by the services."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """
    Commit the session when the block finishes; roll back and re-raise on any error.

    Multi-row writes (role sets, permission sets, user deletion) go through this
    so a failure never leaves a partially applied change behind.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
