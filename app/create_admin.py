"""Provision a shop administrator bound to one barber.

    python -m app.create_admin --username MiliAdmin --provider mili

Signup only ever creates clients, so admins are created here.
"""
import argparse
import asyncio
import getpass
import logging
import sys

from app.core.config import settings
from app.core.db import async_session_maker
from app.models.user import UserCreate, UserRole
from app.services.auth_service import create_user, username_or_document_taken

logger = logging.getLogger(__name__)


async def create_admin(username: str, password: str, provider_id: str, first_name: str | None = None) -> int:
    if provider_id not in settings.providers:
        raise SystemExit(f"Unknown provider {provider_id!r}; known: {', '.join(settings.providers)}")
    async with async_session_maker() as session:
        try:
            if await username_or_document_taken(session, username, None):
                raise SystemExit(f"Username {username!r} already exists")
            user = await create_user(
                session,
                UserCreate(
                    username=username,
                    password=password,
                    first_name=first_name or settings.providers[provider_id].name,
                    role=UserRole.admin,
                    provider_id=provider_id,
                ),
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise
    logger.info("Created admin %s (id=%s) for provider %s", username, user.id, provider_id)
    return user.id


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--username", required=True)
    parser.add_argument("--provider", required=True, help="barber id the admin manages")
    parser.add_argument("--first-name")
    args = parser.parse_args(argv)
    password = getpass.getpass("Password: ")
    if len(password) < 6:
        sys.exit("Password must be at least 6 characters")
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_admin(args.username, password, args.provider, args.first_name))


if __name__ == "__main__":
    main()
