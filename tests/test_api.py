"""HTTP tests for the v1 API wired against an in-memory database."""

import unittest

from fastapi.testclient import TestClient

from app.core.database import get_db
from app.main import app
from app.schemas.user import UserCreate
from app.services import users
from tests import support

PREFIX = "/api/v1"


class TestApiFlow(support.DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)
        self.admin_id = users.create_user(
            self.db, UserCreate(username="admin", password="admin-password")
        ).id
        self.headers = self._login("admin", "admin-password")

    def _login(self, username: str, password: str) -> dict[str, str]:
        resp = self.client.post(
            f"{PREFIX}/auth/login", json={"username": username, "password": password}
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    def test_requires_token(self) -> None:
        resp = self.client.get(f"{PREFIX}/users")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"]["kind"], "unauthenticated")

    def test_bad_login_is_401_invalid_credential(self) -> None:
        for username in ("admin", "ghost"):
            resp = self.client.post(
                f"{PREFIX}/auth/login", json={"username": username, "password": "wrong-password"}
            )
            self.assertEqual(resp.status_code, 401)
            self.assertEqual(resp.json()["detail"]["kind"], "invalid_credential")

    def test_user_crud_hides_credentials(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/users",
            json={"username": "bob", "password": "bobs-password", "email": "bob@example.com"},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        bob = resp.json()
        self.assertNotIn("password", bob)
        self.assertNotIn("password_hash", bob)

        dup = self.client.post(
            f"{PREFIX}/users",
            json={"username": "bob", "password": "bobs-password"},
            headers=self.headers,
        )
        self.assertEqual(dup.status_code, 409)

        upd = self.client.put(
            f"{PREFIX}/users/{bob['id']}",
            json={"username": "robert", "password": "new-password", "description": "ops"},
            headers=self.headers,
        )
        self.assertEqual(upd.status_code, 200)
        self.assertEqual(upd.json()["username"], "bob")
        self.assertEqual(upd.json()["description"], "ops")
        self._login("bob", "bobs-password")

        listed = self.client.get(f"{PREFIX}/users", headers=self.headers).json()["users"]
        self.assertEqual([u["username"] for u in listed], ["admin", "bob"])

        self.assertEqual(
            self.client.delete(f"{PREFIX}/users/{bob['id']}", headers=self.headers).status_code, 204
        )
        self.assertEqual(
            self.client.get(f"{PREFIX}/users/{bob['id']}", headers=self.headers).status_code, 404
        )

    def test_change_password_uses_token_identity(self) -> None:
        other = users.create_user(self.db, UserCreate(username="bob", password="bobs-password")).id
        body = {
            "original_password": "bobs-password",
            "password": "hijacked-pass",
            "confirm_password": "hijacked-pass",
        }
        resp = self.client.put(f"{PREFIX}/users/{other}/password", json=body, headers=self.headers)
        self.assertEqual(resp.status_code, 403)

        own = {
            "original_password": "admin-password",
            "password": "admin-password-2",
            "confirm_password": "admin-password-2",
        }
        resp = self.client.put(f"{PREFIX}/users/{self.admin_id}/password", json=own, headers=self.headers)
        self.assertEqual(resp.status_code, 204, resp.text)
        self._login("admin", "admin-password-2")

    def test_logout_revokes_token(self) -> None:
        self.assertEqual(self.client.post(f"{PREFIX}/auth/logout", headers=self.headers).status_code, 204)
        self.assertEqual(self.client.get(f"{PREFIX}/users", headers=self.headers).status_code, 401)
        self.assertEqual(self.client.post(f"{PREFIX}/auth/logout", headers=self.headers).status_code, 204)

    def test_roles_menus_and_my_permissions(self) -> None:
        menu = self.client.post(f"{PREFIX}/menus", json={"name": "Users"}, headers=self.headers).json()
        child = self.client.post(
            f"{PREFIX}/menus", json={"name": "Detail", "parent_id": menu["id"]}, headers=self.headers
        ).json()
        button = self.client.post(
            f"{PREFIX}/menus/{menu['id']}/buttons",
            json={"name": "Add", "code": "add"},
            headers=self.headers,
        ).json()
        role = self.client.post(f"{PREFIX}/roles", json={"name": "ops"}, headers=self.headers).json()

        resp = self.client.put(
            f"{PREFIX}/roles/{role['id']}/permissions",
            json={"menu_ids": [menu["id"], child["id"]], "button_ids": [button["id"]]},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200, resp.text)

        bad = self.client.put(
            f"{PREFIX}/users/{self.admin_id}/roles", json={"role_ids": [role["id"], 999]}, headers=self.headers
        )
        self.assertEqual(bad.status_code, 422)
        self.assertEqual(bad.json()["detail"]["kind"], "invalid_input")

        resp = self.client.put(
            f"{PREFIX}/users/{self.admin_id}/roles", json={"role_ids": [role["id"]]}, headers=self.headers
        )
        self.assertEqual(resp.json()["role_ids"], [role["id"]])
        self.assertEqual(
            self.client.get(f"{PREFIX}/users/{self.admin_id}/roles", headers=self.headers).json()["role_ids"],
            [role["id"]],
        )

        tree = self.client.get(f"{PREFIX}/users/me/menus", headers=self.headers).json()
        self.assertEqual([n["id"] for n in tree], [menu["id"]])
        self.assertEqual([n["id"] for n in tree[0]["children"]], [child["id"]])

        buttons = self.client.get(
            f"{PREFIX}/users/me/menus/{menu['id']}/buttons", headers=self.headers
        ).json()
        self.assertEqual([b["code"] for b in buttons], ["add"])
        self.assertEqual(
            self.client.get(f"{PREFIX}/users/me/menus/{child['id']}/buttons", headers=self.headers).json(),
            [],
        )


if __name__ == "__main__":
    unittest.main()
