# movie_catalog/db/crud/favorites.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.db_models import UserFavorite
from movie_catalog.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
    is_unique_violation,
)

logger = logging.getLogger(__name__)

# movie_id is a 32-bit INTEGER column
MAX_MOVIE_ID = 2**31 - 1


def parse_movie_id(value: Any) -> int:
    """Accept an int or an integer string (TMDb ids arrive both ways from the browser)."""
    if isinstance(value, bool):
        raise ValidationError("Invalid Movie ID.")
    if isinstance(value, int):
        movie_id = value
    else:
        try:
            movie_id = int(str(value).strip())
        except (TypeError, ValueError):
            raise ValidationError("Invalid Movie ID.")
    if not 1 <= movie_id <= MAX_MOVIE_ID:
        raise ValidationError("Invalid Movie ID.")
    return movie_id


def serialize(row: UserFavorite) -> Dict[str, Any]:
    return {"id": row.movie_id, "title": row.movie_title, "poster_path": row.poster_path}


async def list_favorites(db: AsyncSession, user_id: int) -> List[UserFavorite]:
    try:
        res = await db.execute(
            select(UserFavorite)
            .where(UserFavorite.user_id == user_id)
            .order_by(UserFavorite.added_at.desc())
        )
    except SQLAlchemyError:
        logger.exception("Error fetching favorites for user %s", user_id)
        raise InternalError("Error fetching favorites.")
    return list(res.scalars().all())


async def add_favorite(
    db: AsyncSession,
    user_id: int,
    movie_id: Any,
    title: Optional[str],
    poster_path: Optional[str] = None,
) -> UserFavorite:
    if movie_id is None or movie_id == "" or not title:
        raise ValidationError("Movie ID and Title required.")
    movie_id = parse_movie_id(movie_id)

    row = UserFavorite(
        user_id=user_id,
        movie_id=movie_id,
        movie_title=title,
        poster_path=poster_path,
        added_at=datetime.now(timezone.utc),
    )
    try:
        await db.execute(
            insert(UserFavorite).values(
                user_id=row.user_id,
                movie_id=row.movie_id,
                movie_title=row.movie_title,
                poster_path=row.poster_path,
                added_at=row.added_at,
            )
        )
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        # Plain INSERT: a concurrent duplicate loses here rather than upserting
        if is_unique_violation(exc):
            raise ConflictError("Movie already in favorites.") from exc
        logger.exception("Error adding favorite for user %s, movie %s", user_id, movie_id)
        raise InternalError("Error adding favorite.")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error adding favorite for user %s, movie %s", user_id, movie_id)
        raise InternalError("Error adding favorite.")

    logger.info("Favorite added for user %s: Movie %s", user_id, movie_id)
    return row


async def remove_favorite(db: AsyncSession, user_id: int, movie_id: int) -> None:
    """
    Delete one favorite. A movie owned by someone else is reported exactly like
    a missing one so ids cannot be probed across users.
    """
    try:
        res = await db.execute(
            delete(UserFavorite).where(
                (UserFavorite.user_id == user_id) & (UserFavorite.movie_id == movie_id)
            )
        )
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error removing favorite for user %s, movie %s", user_id, movie_id)
        raise InternalError("Error removing favorite.")

    if not res.rowcount:
        raise NotFoundError("Favorite not found or not owned by user.")
    logger.info("Favorite removed for user %s: Movie %s", user_id, movie_id)
