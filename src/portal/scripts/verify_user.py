"""
Mark a user's email address as verified, bypassing the verification email.

Run with:
    uv run python -m src.portal.scripts.verify_user                 # VERIFY_USER_EMAIL
    uv run python -m src.portal.scripts.verify_user user@example.com
"""

import argparse
import asyncio
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncEngine

from src.portal.core.config import get_settings
from src.portal.core.db import create_engine, get_session
from src.portal.models import User
from src.portal.models.base import utc_now
from src.portal.repositories import UserRepository


async def verify_user(email: str, engine: AsyncEngine) -> User | None:
    """Set email_verified on the user and print the result.

    Returns the updated user, or None on failure. The engine is always
    disposed.
    """
    try:
        async with get_session(engine) as session:
            user = await UserRepository(session).get_by_email(email)
            if user is None:
                raise LookupError(f"No user with email {email}")
            user.email_verified = True
            user.updated_at = utc_now()
            await session.commit()

        print("User verified successfully:")
        print(f"   Email: {user.email}")
        print(f"   Name: {user.name}")
        print(f"   Email Verified: {user.email_verified}")
        return user
    except Exception as e:
        print(f"Error verifying user: {e}")
        return None
    finally:
        await engine.dispose()


def main(argv: Sequence[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Mark a user's email as verified")
    parser.add_argument(
        "email",
        nargs="?",
        default=settings.verify_user_email,
        help=f"Email of the user (default: {settings.verify_user_email})",
    )
    args = parser.parse_args(argv)
    asyncio.run(verify_user(args.email, create_engine()))


if __name__ == "__main__":
    main()
