#!/usr/bin/env python3
"""
Account management for the Event Management API database.

Users are not created through the HTTP API.  This script creates them
and resets their passwords.  It never reads or reveals existing
passwords; it only stores new PBKDF2‑HMAC‑SHA256 hashes.  The database
is the one configured via ``DATABASE_URL`` and is migrated first.

Usage:
    python manage.py create-user --email admin@example.com --name "Admin"
    python manage.py reset-password --email admin@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import sys

from event_management_api.app.core.db import init_db
from event_management_api.app.core.errors import ApiError
from event_management_api.app.services.user_service import UserService


def _read_password(args: argparse.Namespace) -> str:
    password = args.password or getpass.getpass("Enter password: ")
    if not password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)
    return password


def create_user(args: argparse.Namespace) -> None:
    password = _read_password(args)
    user = asyncio.run(UserService.create_user(args.name, args.email, password))
    print(f"[+] Created user {user.id}: {user.email}")


def reset_password(args: argparse.Namespace) -> None:
    password = _read_password(args)
    asyncio.run(UserService.reset_password(args.email, password))
    print(f"[+] Password updated for user: {args.email}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Manage Event Management API users.")
    sub = ap.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-user", help="Create a new user")
    create.add_argument("--email", required=True, help="E-mail address (login name)")
    create.add_argument("--name", required=True, help="Display name")
    create.add_argument("--password", help="Password. If omitted, you'll be prompted securely.")
    create.set_defaults(func=create_user)

    reset = sub.add_parser("reset-password", help="Set a new password for an existing user")
    reset.add_argument("--email", required=True, help="User e-mail to update")
    reset.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    reset.set_defaults(func=reset_password)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    init_db()
    try:
        args.func(args)
    except ApiError as e:
        print(f"[!] {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
