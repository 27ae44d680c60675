"""ORM models for roles, menus, buttons and the join tables that grant them."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from app.models.base import Base


class Role(Base):
    __tablename__ = "roles"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
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


class Menu(Base):
    """
    Navigable section of the admin UI. parent_id builds the left-menu tree;
    sequence orders siblings (ties broken by id).
    """

    __tablename__ = "menus"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False)
    path = Column(String(1024), nullable=False, default="")
    icon = Column(String(128), nullable=False, default="")
    parent_id = Column(
        Integer,
        ForeignKey("menus.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    sequence = Column(Integer, nullable=False, default=0)
    memo = Column(Text, nullable=False, default="")


class Button(Base):
    """Fine-grained action inside exactly one menu; code is the action identifier."""

    __tablename__ = "buttons"
    __table_args__ = (
        UniqueConstraint("menu_id", "code", name="uq_buttons_menu_code"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    menu_id = Column(
        Integer,
        ForeignKey("menus.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(128), nullable=False)
    code = Column(String(128), nullable=False)


class UserRole(Base):
    """Many-to-many user/role assignment; the composite key makes each pair unique."""

    __tablename__ = "user_roles"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )


class RoleMenu(Base):
    __tablename__ = "role_menus"

    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    menu_id = Column(
        Integer,
        ForeignKey("menus.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )


class RoleButton(Base):
    __tablename__ = "role_buttons"

    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    button_id = Column(
        Integer,
        ForeignKey("buttons.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
