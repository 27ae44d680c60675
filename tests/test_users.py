"""Tests for app.services.users: account lifecycle and password change."""

import unittest

from app.core.errors import (
    ConflictError,
    ErrorKind,
    ForbiddenError,
    InvalidCredentialError,
    InvalidInputError,
    NotFoundError,
    UnauthenticatedError,
)
from app.core.security import verify_password
from app.models import User, UserRole
from app.schemas.rbac import RoleCreate
from app.schemas.user import PasswordChange, UserCreate, UserUpdate
from app.services import role_assignment, roles, sessions, users
from tests import support


class TestCreateUser(support.DatabaseTestCase):
    def test_creates_user_without_exposing_credential(self) -> None:
        out = users.create_user(
            self.db,
            UserCreate(username="alice", password="correct-horse", email="a@example.com"),
        )
        self.assertEqual(out.username, "alice")
        self.assertEqual(out.email, "a@example.com")
        self.assertEqual(out.status, "active")
        dumped = out.model_dump()
        self.assertNotIn("password", dumped)
        self.assertNotIn("password_hash", dumped)

    def test_stores_salted_hash_not_plaintext(self) -> None:
        user_id = self.create_user(password="correct-horse")
        row = self.db.get(User, user_id)
        self.assertNotEqual(row.password_hash, "correct-horse")
        self.assertTrue(verify_password("correct-horse", row.password_hash))

    def test_duplicate_username_conflicts(self) -> None:
        self.create_user("alice")
        with self.assertRaises(ConflictError) as ctx:
            self.create_user("alice")
        self.assertEqual(ctx.exception.kind, ErrorKind.CONFLICT)

    def test_missing_username_is_invalid_input(self) -> None:
        with self.assertRaises(InvalidInputError):
            users.create_user(self.db, UserCreate(password="correct-horse"))
        with self.assertRaises(InvalidInputError):
            users.create_user(self.db, UserCreate(username="   ", password="correct-horse"))

    def test_missing_or_short_password_is_invalid_input(self) -> None:
        with self.assertRaises(InvalidInputError):
            users.create_user(self.db, UserCreate(username="bob"))
        with self.assertRaises(InvalidInputError):
            users.create_user(self.db, UserCreate(username="bob", password="short"))

    def test_ids_are_not_reused_after_delete(self) -> None:
        first = self.create_user("alice")
        users.delete_user(self.db, first)
        second = self.create_user("bob")
        self.assertGreater(second, first)


class TestUpdateUser(support.DatabaseTestCase):
    def test_updates_profile_fields(self) -> None:
        user_id = self.create_user()
        out = users.update_user(
            self.db, user_id, UserUpdate(email="new@example.com", description="ops")
        )
        self.assertEqual(out.email, "new@example.com")
        self.assertEqual(out.description, "ops")
        self.assertEqual(out.resource_version, 1)

    def test_never_changes_username_or_credential(self) -> None:
        user_id = self.create_user("alice", "correct-horse")
        before_hash = self.db.get(User, user_id).password_hash
        payload = UserUpdate.model_validate(
            {
                "username": "mallory",
                "password": "another-password",
                "password_hash": "x",
                "description": "changed",
            }
        )
        out = users.update_user(self.db, user_id, payload)
        self.assertEqual(out.username, "alice")
        self.assertEqual(out.description, "changed")
        self.db.expire_all()
        self.assertEqual(self.db.get(User, user_id).password_hash, before_hash)
        sessions.login(self.db, "alice", "correct-horse")

    def test_unknown_user_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            users.update_user(self.db, 999, UserUpdate(description="x"))

    def test_stale_resource_version_conflicts(self) -> None:
        user_id = self.create_user()
        users.update_user(self.db, user_id, UserUpdate(description="v1", resource_version=0))
        with self.assertRaises(ConflictError):
            users.update_user(self.db, user_id, UserUpdate(description="v2", resource_version=0))
        self.assertEqual(users.get_user(self.db, user_id).description, "v1")


class TestReadUsers(support.DatabaseTestCase):
    def test_get_unknown_user_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            users.get_user(self.db, 1)

    def test_list_orders_by_id(self) -> None:
        self.create_user("bob")
        self.create_user("alice")
        self.assertEqual([u.username for u in users.list_users(self.db)], ["bob", "alice"])


class TestDeleteUser(support.DatabaseTestCase):
    def test_delete_cascades_roles_and_sessions(self) -> None:
        user_id = self.create_user("alice", "correct-horse")
        role = roles.create_role(self.db, RoleCreate(name="ops"))
        role_assignment.set_user_roles(self.db, user_id, [role.id])
        token = sessions.login(self.db, "alice", "correct-horse").access_token

        users.delete_user(self.db, user_id)

        self.assertEqual(self.db.query(UserRole).filter(UserRole.user_id == user_id).count(), 0)
        with self.assertRaises(NotFoundError):
            role_assignment.get_roles_for_user(self.db, user_id)
        with self.assertRaises(UnauthenticatedError):
            sessions.resolve(self.db, token)
        # The role itself survives.
        self.assertEqual(roles.get_role(self.db, role.id).name, "ops")

    def test_delete_unknown_user_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            users.delete_user(self.db, 42)


class TestChangePassword(support.DatabaseTestCase):
    def _change(self, user_id: int, original: str, new: str, confirm: str | None = None) -> PasswordChange:
        return PasswordChange(
            user_id=user_id,
            original_password=original,
            password=new,
            confirm_password=new if confirm is None else confirm,
        )

    def test_changes_own_password(self) -> None:
        user_id = self.create_user("alice", "correct-horse")
        users.change_password(self.db, user_id, self._change(user_id, "correct-horse", "battery-staple"))
        sessions.login(self.db, "alice", "battery-staple")
        with self.assertRaises(InvalidCredentialError):
            sessions.login(self.db, "alice", "correct-horse")

    def test_other_user_is_forbidden_even_with_correct_password(self) -> None:
        alice = self.create_user("alice", "correct-horse")
        bob = self.create_user("bob", "bobs-password")
        for original in ("bobs-password", "wrong-password"):
            with self.assertRaises(ForbiddenError):
                users.change_password(self.db, alice, self._change(bob, original, "hijacked-pass"))
        sessions.login(self.db, "bob", "bobs-password")

    def test_wrong_current_password(self) -> None:
        user_id = self.create_user("alice", "correct-horse")
        with self.assertRaises(InvalidCredentialError):
            users.change_password(self.db, user_id, self._change(user_id, "nope-nope", "battery-staple"))
        sessions.login(self.db, "alice", "correct-horse")

    def test_confirmation_mismatch(self) -> None:
        user_id = self.create_user("alice", "correct-horse")
        with self.assertRaises(InvalidInputError):
            users.change_password(
                self.db,
                user_id,
                self._change(user_id, "correct-horse", "battery-staple", confirm="battery-stapler"),
            )

    def test_new_password_too_short(self) -> None:
        user_id = self.create_user("alice", "correct-horse")
        with self.assertRaises(InvalidInputError):
            users.change_password(self.db, user_id, self._change(user_id, "correct-horse", "short"))

    def test_unknown_target_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            users.change_password(self.db, 7, self._change(7, "correct-horse", "battery-staple"))


if __name__ == "__main__":
    unittest.main()
