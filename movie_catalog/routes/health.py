# movie_catalog/routes/health.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.database import get_async_db
from movie_catalog.infra import cache

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


# --- simple DB ping ---------------------------------------------------------
async def ping_db(db: AsyncSession) -> bool:
    try:
        res = await db.execute(text("SELECT 1"))
        return res.scalar() == 1
    except SQLAlchemyError:
        logger.warning("DB ping failed", exc_info=True)
        return False


# --- Redis ping (None when caching is not configured) -----------------------
async def ping_redis() -> Optional[bool]:
    r = cache.client()
    if r is None:
        return None
    try:
        return bool(await r.ping())
    except (RedisError, OSError):
        logger.warning("Redis ping failed", exc_info=True)
        return False


@router.get("/health", summary="Liveness")
async def health() -> Dict[str, Any]:
    # super cheap liveness (no external deps)
    return {"ok": True}


@router.get("/ready", summary="Readiness")
async def ready(db: AsyncSession = Depends(get_async_db)) -> Dict[str, Any]:
    db_ok = await ping_db(db)
    redis_ok = await ping_redis()
    return {"ok": db_ok, "db": db_ok, "redis": redis_ok}
