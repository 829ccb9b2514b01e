# movie_catalog/db/crud/users.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.errors import ConflictError, ValidationError, is_unique_violation
from movie_catalog.models_auth import User


async def create_user(db: AsyncSession, username: str, email: str, password_hash: str) -> User:
    """
    Insert a new user. The unique constraints on username / email are the only
    duplicate check, so two racing registrations cannot both succeed.
    """
    if not username or not email or not password_hash:
        raise ValidationError("Username, email, and password required.")

    user = User(username=username, email=email, password_hash=password_hash)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if is_unique_violation(exc):
            raise ConflictError("Username or email already exists.") from exc
        raise
    await db.refresh(user)
    return user


async def find_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    # case-sensitive exact match
    res = await db.execute(select(User).where(User.username == username))
    return res.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)
