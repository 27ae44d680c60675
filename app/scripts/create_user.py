"""
Create a user (e.g. the first administrator). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [--role NAME ...]
Example:
  python -m app.scripts.create_user admin your-secure-password --role admin
Roles named with --role are created if they do not exist yet.
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.errors import ServiceError
from app.models import Role
from app.schemas.rbac import RoleCreate
from app.schemas.user import UserCreate
from app.services import role_assignment, roles, users

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Gatekeeper user (no registration UI).")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument(
        "--role",
        action="append",
        default=[],
        metavar="NAME",
        help="Role to assign (repeatable; created when missing)",
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = users.create_user(db, UserCreate(username=args.username, password=args.password))
        role_ids = []
        for name in args.role:
            existing = db.query(Role).filter(Role.name == name).first()
            role_id = existing.id if existing else roles.create_role(db, RoleCreate(name=name)).id
            role_ids.append(role_id)
        if role_ids:
            role_assignment.set_user_roles(db, user.id, role_ids)
        print(f"Created user '{user.username}' (id={user.id}) with roles {args.role or '[]'}.")
        return 0
    except ServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
