"""
Create the bootstrap admin (superuser) account if it does not exist yet.

Run locally (from backend/):
  PYTHONPATH=. ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=... python scripts/create_admin.py
"""

from __future__ import annotations

import asyncio
import logging

from fastapi_users.password import PasswordHelper
from sqlalchemy import func, select

from core.config import settings
from core.logging import configure_logging
from db.database import async_session_maker, create_db_and_tables
from db.users import User

logger = logging.getLogger("scripts.create_admin")


async def main() -> None:
    await create_db_and_tables()
    email = settings.admin_email.strip().lower()
    async with async_session_maker() as db:
        res = await db.execute(select(User).where(func.lower(User.email) == email))
        if res.scalar_one_or_none():
            logger.info("Admin user already exists: %s", email)
            return

        db.add(
            User(
                email=email,
                name="Admin",
                hashed_password=PasswordHelper().hash(settings.admin_password),
                is_active=True,
                is_superuser=True,
                is_verified=True,
            )
        )
        await db.commit()
        logger.info("Admin user created: %s", email)


if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
