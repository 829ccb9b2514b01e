# movie_catalog/db/crud/sessions.py
from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.core.settings import settings
from movie_catalog.models_auth import UserSession


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def create_session(db: AsyncSession, user_id: int, ttl: Optional[timedelta] = None) -> str:
    """Persist a new session for `user_id` and return the plaintext token for the cookie."""
    if ttl is None:
        ttl = timedelta(days=settings.session_ttl_days)
    token = secrets.token_urlsafe(32)
    db.add(UserSession(
        token_hash=_hash_token(token),
        user_id=user_id,
        expires_at=_utcnow() + ttl,
    ))
    await db.commit()
    return token


async def resolve_session(db: AsyncSession, token: Optional[str]) -> Optional[int]:
    """
    Return the user id bound to a live session, or None.
    Expired rows are ignored but left in place (see purge_expired_sessions).
    """
    if not token:
        return None
    res = await db.execute(
        select(UserSession.user_id).where(
            UserSession.token_hash == _hash_token(token),
            UserSession.expires_at > _utcnow(),
        )
    )
    return res.scalar_one_or_none()


async def destroy_session(db: AsyncSession, token: Optional[str]) -> None:
    if not token:
        return
    await db.execute(delete(UserSession).where(UserSession.token_hash == _hash_token(token)))
    await db.commit()


async def purge_expired_sessions(db: AsyncSession) -> int:
    res = await db.execute(delete(UserSession).where(UserSession.expires_at <= _utcnow()))
    await db.commit()
    return res.rowcount or 0
