"""CRUD operations for User.

Users are created on first sign-in; emails are stored lower-cased.
"""

from __future__ import annotations

from sqlmodel import select

from contextweaver.db.engine import get_session
from contextweaver.db.models import User


async def get_user_by_email(email: str) -> User | None:
    """Get a user by email address (case-insensitive)."""
    async with get_session() as session:
        result = await session.exec(
            select(User).where(User.email == email.strip().lower())
        )
        return result.first()


async def get_or_create_user(email: str, full_name: str = "") -> User:
    """Find a user by email or create them.

    An existing user's ``full_name`` is filled in if it was empty and a
    name is supplied now.

    Args:
        email: The user's email address.
        full_name: Display name to store for new users.

    Returns:
        The existing or newly created User.
    """
    email = email.strip().lower()
    async with get_session() as session:
        result = await session.exec(select(User).where(User.email == email))
        user = result.first()
        if user is None:
            user = User(email=email, full_name=full_name.strip())
        elif full_name.strip() and not user.full_name:
            user.full_name = full_name.strip()
        else:
            return user
        session.add(user)
        await session.flush()
        await session.refresh(user)
        return user
