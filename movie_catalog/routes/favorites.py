# movie_catalog/routes/favorites.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.database import get_async_db
from movie_catalog.db.crud import favorites as favorites_repo
from movie_catalog.schemas import FavoriteIn, FavoriteOut, MessageOut
from movie_catalog.security import SessionContext, require_user

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=List[FavoriteOut])
async def list_favorites(
    ctx: SessionContext = Depends(require_user),
    db: AsyncSession = Depends(get_async_db),
):
    rows = await favorites_repo.list_favorites(db, ctx.user_id)
    return [favorites_repo.serialize(r) for r in rows]


@router.post("", response_model=MessageOut, status_code=201)
async def add_favorite(
    payload: FavoriteIn,
    ctx: SessionContext = Depends(require_user),
    db: AsyncSession = Depends(get_async_db),
):
    await favorites_repo.add_favorite(db, ctx.user_id, payload.id, payload.title, payload.poster_path)
    return {"message": "Favorite added successfully."}


@router.delete("/{movie_id}", response_model=MessageOut)
async def remove_favorite(
    movie_id: str,
    ctx: SessionContext = Depends(require_user),
    db: AsyncSession = Depends(get_async_db),
):
    # taken as str so a bad id is our 400, not a framework 422
    await favorites_repo.remove_favorite(db, ctx.user_id, favorites_repo.parse_movie_id(movie_id))
    return {"message": "Favorite removed successfully."}
