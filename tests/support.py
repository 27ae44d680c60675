"""Shared test fixtures: an in-memory SQLite database with every table created."""

import unittest
from unittest.mock import patch

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, Button, Menu
from app.schemas.user import UserCreate
from app.services import users


def make_session_factory() -> sessionmaker:
    """One connection shared by every session, so the in-memory DB survives across them."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


class DatabaseTestCase(unittest.TestCase):
    """TestCase with a fresh database in self.db and cheap bcrypt rounds."""

    def setUp(self) -> None:
        rounds = patch("app.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)
        self.session_factory = make_session_factory()
        self.db: Session = self.session_factory()
        self.addCleanup(self.db.close)

    def create_user(self, username: str = "alice", password: str = "correct-horse") -> int:
        return users.create_user(self.db, UserCreate(username=username, password=password)).id

    def add_menu(self, name: str, parent_id: int | None = None, sequence: int = 0) -> int:
        menu = Menu(name=name, parent_id=parent_id, sequence=sequence)
        self.db.add(menu)
        self.db.commit()
        return menu.id

    def add_button(self, menu_id: int, code: str) -> int:
        button = Button(menu_id=menu_id, name=code.title(), code=code)
        self.db.add(button)
        self.db.commit()
        return button.id
