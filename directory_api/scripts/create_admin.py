"""
Create an administrator account for the moderation panel.

Usage:
    python -m directory_api.scripts.create_admin --username admin --password secret
    python -m directory_api.scripts.create_admin --username root --password secret --role super_admin
"""
import argparse
import asyncio
import sys

from directory_api.core.database import AsyncSessionLocal, create_tables
from directory_api.database.models import AdminRole
from directory_api.services.auth_service import auth_service


async def create_admin(username: str, password: str, role: AdminRole) -> int:
    """Create the account unless the username is taken. Returns a process exit code."""
    await create_tables()

    async with AsyncSessionLocal() as session:
        existing = await auth_service.get_admin_by_username(session, username)
        if existing:
            print(f"Admin user '{username}' already exists (id={existing.id})")
            return 1

        admin = await auth_service.create_admin(session, username, password, role=role)
        print(f"Created admin user '{admin.username}' (id={admin.id}, role={admin.role})")
        return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create an admin user")
    parser.add_argument("--username", required=True, help="Login name")
    parser.add_argument("--password", required=True, help="Plain-text password, stored as a bcrypt hash")
    parser.add_argument(
        "--role",
        choices=[role.value for role in AdminRole],
        default=AdminRole.ADMIN.value,
        help="Account role",
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(create_admin(args.username, args.password, AdminRole(args.role))))
