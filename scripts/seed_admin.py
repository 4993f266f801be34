"""
Seed Admin User

Creates an admin account for the lab recruitment platform. Self-registration
only ever creates students, so run this once per environment.

Usage:
    ADMIN_PASSWORD=... python scripts/seed_admin.py --email admin@lab.edu --username admin
"""

import argparse
import asyncio
import logging
import os
import sys

from sqlalchemy import or_, select

from lab_recruitment.core.database import async_session_maker, close_db
from lab_recruitment.core.logging import setup_logging
from lab_recruitment.core.security import hash_password
from lab_recruitment.modules.users.models import User, UserRole, UserStatus

logger = logging.getLogger("seed_admin")

MIN_PASSWORD_LENGTH = 8


async def seed_admin(email: str, username: str, password: str) -> None:
    """Create the admin user if neither the email nor the username exists."""
    email = email.strip().lower()

    try:
        async with async_session_maker() as db:
            result = await db.execute(
                select(User).where(
                    or_(User.email == email, User.username == username),
                    User.deleted_at.is_(None),
                )
            )
            existing_user = result.scalars().first()

            if existing_user:
                logger.info(
                    f"User already exists: {existing_user.email} "
                    f"(id={existing_user.id}, role={existing_user.role.value})"
                )
                return

            admin_user = User(
                username=username,
                email=email,
                password_hash=hash_password(password),
                role=UserRole.ADMIN,
                status=UserStatus.ACTIVE,
            )

            db.add(admin_user)
            await db.commit()
            await db.refresh(admin_user)

            logger.info(f"Admin created: {admin_user.email} (id={admin_user.id})")
    finally:
        await close_db()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"))
    parser.add_argument("--username", default=os.getenv("ADMIN_USERNAME", "admin"))
    args = parser.parse_args()

    setup_logging()

    password = os.getenv("ADMIN_PASSWORD", "")
    if not args.email:
        logger.error("Admin email is required (--email or ADMIN_EMAIL)")
        return 1
    if len(password) < MIN_PASSWORD_LENGTH:
        logger.error(f"ADMIN_PASSWORD must be at least {MIN_PASSWORD_LENGTH} characters")
        return 1

    asyncio.run(seed_admin(args.email, args.username, password))
    return 0


if __name__ == "__main__":
    sys.exit(main())
