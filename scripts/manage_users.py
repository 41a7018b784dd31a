#!/usr/bin/env python3
"""Manage user claims and roles from the command line.

Claims are assigned out-of-band; there is no admin endpoint for them.

Usage:
    python scripts/manage_users.py grant-claim alice@example.com DeleteProvider
    python scripts/manage_users.py revoke-claim alice@example.com DeleteProvider
    python scripts/manage_users.py add-role alice@example.com Admin
    python scripts/manage_users.py list-claims alice@example.com
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from adapter.sql.connection import create_tables, get_sessionmaker
from adapter.sql.user_repository import SqlUserRepository
from domain.model.user import UserClaim
from port.user_repository import UserRepository


async def run(command: str, repo: UserRepository, email: str, name: str | None = None, value: str = "true") -> int:
    """Execute one management command. Returns the process exit code."""
    user = await repo.get_by_email(email.lower())
    if not user:
        print(f"No user registered with email {email}", file=sys.stderr)
        return 1

    if command == "list-claims":
        for claim in user.claims:
            print(f"{claim.type}={claim.value}")
        for role in user.roles:
            print(f"role={role}")
        return 0

    if command == "grant-claim":
        ok = await repo.add_claim(user.id, UserClaim(type=name, value=value))
        print(f"Granted {name}={value} to {email}" if ok else f"{email} already has {name}={value}")
        return 0

    if command == "revoke-claim":
        ok = await repo.remove_claim(user.id, UserClaim(type=name, value=value))
        print(f"Revoked {name}={value} from {email}" if ok else f"{email} does not have {name}={value}")
        return 0 if ok else 1

    if command == "add-role":
        ok = await repo.add_to_role(user.id, name)
        print(f"Added {email} to role {name}" if ok else f"Failed to add {email} to role {name}")
        return 0 if ok else 1

    raise ValueError(f"Unknown command: {command}")


async def main_async(args: argparse.Namespace) -> int:
    await create_tables()
    async with get_sessionmaker()() as session:
        return await run(args.command, SqlUserRepository(session), args.email, getattr(args, "name", None),
                         getattr(args, "value", "true"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage user claims and roles")
    sub = parser.add_subparsers(dest="command", required=True)

    for command in ("grant-claim", "revoke-claim"):
        p = sub.add_parser(command)
        p.add_argument("email")
        p.add_argument("name", help="Claim type, e.g. DeleteProvider")
        p.add_argument("--value", default="true", help="Claim value (default: true)")

    p = sub.add_parser("add-role")
    p.add_argument("email")
    p.add_argument("name", help="Role name")

    p = sub.add_parser("list-claims")
    p.add_argument("email")
    return parser


def main():
    args = build_parser().parse_args()
    sys.exit(asyncio.run(main_async(args)))


if __name__ == "__main__":
    main()
