# hackreg/seed_admin.py
"""
Create an admin account (role=admin, no team) for the dashboard login.

    python -m hackreg.seed_admin --name "Jane Doe" --contact 9876543210 \
        --email jane@example.org

Login later matches on (name, contact), so both must be exactly what the
admin will type.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from hackreg.data_client import user_store
from hackreg.data_client.mongo import create_client, ensure_indexes, ping
from hackreg.errors import DuplicateMember
from hackreg.models import Role, UserDocument
from hackreg.utils import describe_validation_error, new_user_id

logger = logging.getLogger("hackreg.seed_admin")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hackreg.seed_admin", description="Create a dashboard admin user.")
    p.add_argument("--name", required=True)
    p.add_argument("--contact", required=True, help="10-digit contact number (login secret)")
    p.add_argument("--email", default=None, help="defaults to admin.<contact>@example.org")
    p.add_argument("--gender", default="other", choices=["male", "female", "other"])
    p.add_argument("--college", default="Organizing Committee")
    p.add_argument("--stream", default="Administration")
    p.add_argument("--year", type=int, default=1)
    return p


def build_admin(args: argparse.Namespace) -> UserDocument:
    return UserDocument(
        user_id=new_user_id(),
        team_id=None,
        name=args.name,
        gender=args.gender,
        email=args.email or f"admin.{args.contact}@example.org",
        contact=args.contact,
        college=args.college,
        stream=args.stream,
        year=args.year,
        role=Role.ADMIN,
    )


async def seed(db, admin: UserDocument) -> str:
    await ensure_indexes(db)
    oid = await user_store.create_admin(db, admin)
    return str(oid)


async def _run(admin: UserDocument) -> str:
    client, db = create_client()
    try:
        await ping(db)
        return await seed(db, admin)
    finally:
        client.close()


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    args = build_parser().parse_args(argv)

    try:
        admin = build_admin(args)
    except ValidationError as exc:
        logger.error("Invalid admin data: %s", describe_validation_error(exc))
        return 2

    try:
        oid = asyncio.run(_run(admin))
    except DuplicateMember as exc:
        logger.error(exc.message)
        return 1

    print(f"Admin created: _id={oid} user_id={admin.user_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
