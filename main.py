#!/usr/bin/env python3
"""
AuthKit admin CLI -- the privileged path for account provisioning.

Roles are never changed over HTTP. The first admin, and every later role
change, goes through this script, run by someone with access to the
server's environment (SECRET_KEY / DATABASE_URL).

Usage:
  python main.py create-user "Rona" rona@x.com secret1
  python main.py create-user "Ada" ada@x.com s3cret! --role admin
  python main.py set-role rona@x.com admin
"""

import argparse
import logging
import sys
from typing import Optional

from auth import accounts
from auth.errors import AuthError
from auth.models import Role
from auth.store import UserStore

logger = logging.getLogger("authkit.cli")


def _create_user(store: UserStore, args: argparse.Namespace) -> int:
    try:
        user, _token = accounts.register(store, args.name, args.email, args.password)
    except AuthError as exc:
        print(f"  [!] {exc.message}", file=sys.stderr)
        return 1
    role = Role(args.role)
    if role is not Role.user:
        store.set_role(user.id, role)
    print(f"Created user {user.id} <{user.email}> with role '{role.value}'.")
    return 0


def _set_role(store: UserStore, args: argparse.Namespace) -> int:
    user = store.find_by_email(args.email)
    if user is None:
        print(f"  [!] No user with email '{args.email}'.", file=sys.stderr)
        return 1
    store.set_role(user.id, Role(args.role))
    logger.info("Role of user %s set to %s", user.id, args.role)
    print(f"User {user.id} <{user.email}> is now '{args.role}'.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AuthKit account administration.")
    parser.add_argument("--db", default=None, help="Database URL (defaults to DATABASE_URL / settings).")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-user", help="Create an account (optionally as admin).")
    create.add_argument("name")
    create.add_argument("email")
    create.add_argument("password")
    create.add_argument("--role", default=Role.user.value, choices=[r.value for r in Role])
    create.set_defaults(func=_create_user)

    set_role = sub.add_parser("set-role", help="Grant or revoke the admin role.")
    set_role.add_argument("email")
    set_role.add_argument("role", choices=[r.value for r in Role])
    set_role.set_defaults(func=_set_role)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)-5s %(name)s %(message)s")
    args = build_parser().parse_args(argv)
    store = UserStore(args.db)
    try:
        return args.func(store, args)
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
