"""Operator commands: bootstrap admins, seed brand tools, list users."""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from contextlib import suppress
from pathlib import Path

from pydantic import ValidationError

from brandhub.db import database, models, schemas
from brandhub.db.repositories import tools as tool_repo
from brandhub.db.repositories import users as user_repo


logger = logging.getLogger("brandhub.cli")


# Access SessionLocal dynamically so test fixtures that rebind the
# sessionmaker are respected.
SessionLocal = lambda: database.SessionLocal()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="brandhub-admin", description="Brand Hub administration")
    sub = parser.add_subparsers(dest="command", required=True)

    admin = sub.add_parser("create-admin", help="Create an admin user or promote an existing one")
    admin.add_argument("--username", required=True)
    admin.add_argument("--email", required=True)
    admin.add_argument("--password", help="Prompted for when omitted")

    seed = sub.add_parser("seed-tool", help="Create or overwrite a brand tool from source files")
    seed.add_argument("--slug", required=True)
    seed.add_argument("--title", required=True)
    seed.add_argument("--description", default="")
    seed.add_argument("--html", required=True, type=Path, help="HTML body file")
    seed.add_argument("--css", type=Path, help="Stylesheet file")
    seed.add_argument("--js", type=Path, help="Script file")

    sub.add_parser("list-users", help="Print all users")
    return parser.parse_args(argv)


def create_admin(session, username: str, email: str, password: str | None) -> int:
    existing = user_repo.get_by_email(session, email) or user_repo.get_by_username(session, username)
    if existing is not None:
        existing.role = models.ROLE_ADMIN
        existing.is_active = True
        session.commit()
        if password:
            user_repo.set_password(session, existing, password)
        print(f"Promoted existing user {existing.username} <{existing.email}> to admin.")
        logger.info("cli_admin_promoted: user_id=%s", existing.id)
        return 0

    if not password:
        password = getpass.getpass("Password: ")
    try:
        payload = schemas.RegisterRequest(username=username, email=email, password=password, role="admin")
    except ValidationError as exc:
        for error in exc.errors():
            print(f"{'.'.join(str(p) for p in error['loc'])}: {error['msg']}", file=sys.stderr)
        return 1
    user = user_repo.create_user(
        session,
        username=payload.username,
        email=payload.email,
        password=payload.password,
        role=models.ROLE_ADMIN,
    )
    print(f"Created admin {user.username} <{user.email}>.")
    logger.info("cli_admin_created: user_id=%s", user.id)
    return 0


def _read(path: Path | None) -> str:
    return path.read_text(encoding="utf-8") if path else ""


def seed_tool(session, args: argparse.Namespace) -> int:
    if not tool_repo.is_valid_slug(args.slug):
        print("Slug can only contain lowercase letters, numbers, and hyphens", file=sys.stderr)
        return 1
    try:
        values = {
            "title": args.title,
            "description": args.description,
            "html_code": _read(args.html),
            "css_code": _read(args.css),
            "js_code": _read(args.js),
            "is_active": True,
        }
    except OSError as exc:
        print(f"Could not read tool source: {exc}", file=sys.stderr)
        return 1
    tool = tool_repo.upsert_by_slug(session, slug=args.slug, values=values)
    print(f"Seeded tool {tool.slug} ({tool.id}).")
    logger.info("cli_tool_seeded: slug=%s", tool.slug)
    return 0


def list_users(session) -> int:
    users = user_repo.list_users(session, limit=10000)
    for user in users:
        status = "active" if user.is_active else "inactive"
        print(f"{user.id}  {user.username:<20} {user.email:<32} {user.role:<6} {status}")
    if not users:
        print("No users.")
    return 0


def main(argv: list[str] | None = None) -> int:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    session = SessionLocal()
    try:
        if args.command == "create-admin":
            return create_admin(session, args.username, args.email, args.password)
        if args.command == "seed-tool":
            return seed_tool(session, args)
        return list_users(session)
    finally:
        with suppress(Exception):
            session.close()


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
