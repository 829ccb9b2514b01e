# movie_catalog/services/tmdb_cached.py
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List

from movie_catalog.core.settings import settings
from movie_catalog.infra import cache
from movie_catalog.integrations.tmdb import TMDBClient

logger = logging.getLogger(__name__)


async def _cached(key: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
    """Read-through cache. Redis problems never fail the request; we fall through to TMDb."""
    try:
        val = await cache.get_json(key)
        if val is not None:
            return val
    except Exception:
        logger.warning("Cache read failed for %s", key, exc_info=True)

    data = await fetch()

    if data:
        try:
            await cache.set_json(key, data, ttl=settings.tmdb_cache_ttl)
        except Exception:
            logger.warning("Cache write failed for %s", key, exc_info=True)
    return data


async def now_playing(client: TMDBClient) -> List[Dict[str, Any]]:
    return await _cached("tmdb:movie:now_playing:1", client.now_playing)


async def popular(client: TMDBClient) -> List[Dict[str, Any]]:
    return await _cached("tmdb:movie:popular:1", client.popular)


async def search_movies(client: TMDBClient, query: str) -> List[Dict[str, Any]]:
    qn = query.strip().lower()
    return await _cached(f"tmdb:search:movie:{qn}", lambda: client.search_movies(query))


async def movie_detail(client: TMDBClient, movie_id: int) -> Dict[str, Any]:
    return await _cached(
        f"tmdb:movie:{int(movie_id)}:credits,videos",
        lambda: client.movie_detail(movie_id, append=["credits", "videos"]),
    )
