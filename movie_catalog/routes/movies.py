# movie_catalog/routes/movies.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query

from movie_catalog.errors import InternalError, ValidationError
from movie_catalog.integrations.tmdb import TMDBClient, TMDBError, get_tmdb_client
from movie_catalog.services import tmdb_cached

router = APIRouter(tags=["movies"])
logger = logging.getLogger(__name__)

# Public TMDb proxy, no session needed


@router.get("/movies/now_playing")
async def now_playing(client: TMDBClient = Depends(get_tmdb_client)) -> List[Dict[str, Any]]:
    try:
        return await tmdb_cached.now_playing(client)
    except TMDBError:
        logger.exception("Error fetching now playing movies")
        raise InternalError("Server error fetching latest movies")


@router.get("/movies/popular")
async def popular(client: TMDBClient = Depends(get_tmdb_client)) -> List[Dict[str, Any]]:
    try:
        return await tmdb_cached.popular(client)
    except TMDBError:
        logger.exception("Error fetching popular movies")
        raise InternalError("Server error fetching popular movies")


@router.get("/search")
async def search(
    query: Optional[str] = Query(None),
    client: TMDBClient = Depends(get_tmdb_client),
) -> List[Dict[str, Any]]:
    if not query or not query.strip():
        raise ValidationError("Search query required")
    try:
        return await tmdb_cached.search_movies(client, query)
    except TMDBError:
        logger.exception('Error searching movies for "%s"', query)
        raise InternalError("Server error during search")


@router.get("/movie/{movie_id}")
async def movie_detail(
    movie_id: int = Path(..., ge=1),
    client: TMDBClient = Depends(get_tmdb_client),
) -> Dict[str, Any]:
    try:
        return await tmdb_cached.movie_detail(client, movie_id)
    except TMDBError:
        logger.exception("Error fetching details for movie %s", movie_id)
        raise InternalError("Server error fetching movie details")
