# movie_catalog/main.py — app wiring: logging, CORS, error handlers, routers, static frontend

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from movie_catalog import scheduler
from movie_catalog.core.settings import settings
from movie_catalog.database import async_engine
from movie_catalog.db_models import Base
from movie_catalog.errors import register_exception_handlers
from movie_catalog.infra import cache
from movie_catalog.routes import auth, favorites, frontend, health, movies

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
log = logging.getLogger("startup")


async def _check_database() -> None:
    try:
        async with async_engine.begin() as conn:
            if settings.db_create_all:
                await conn.run_sync(Base.metadata.create_all)
                log.info("Database tables ensured (DB_CREATE_ALL)")
            await conn.execute(text("SELECT 1"))
        log.info("Database connected successfully")
    except SQLAlchemyError:
        # keep serving: /api/ready reports the DB as down
        log.exception("Database check failed at startup")


@asynccontextmanager
async def lifespan(_: FastAPI):
    if not (settings.tmdb_api_key or settings.tmdb_bearer_token):
        log.warning("TMDB_API_KEY / TMDB_BEARER_TOKEN not set; movie proxy routes will return 500")
    if settings.redis_url:
        cache.init(settings.redis_url)
        log.info("Redis cache initialised")
    await _check_database()
    if scheduler.start_jobs(settings.session_sweep_minutes):
        log.info("Expired session sweep every %s min", settings.session_sweep_minutes)
    try:
        yield
    finally:
        scheduler.stop_jobs()
        await cache.close()
        await async_engine.dispose()


app = FastAPI(
    title="Movie Catalog API",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url=None,
    lifespan=lifespan,
)

# ───────────────── CORS ─────────────────
# Sessions ride on a cookie, so credentials must be allowed.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Single API namespace prefix
api = APIRouter(prefix="/api")
for _router in (health.router, auth.router, favorites.router, movies.router):
    api.include_router(_router)
    log.debug("Mounted router: %s (prefix=%s)", _router.tags, _router.prefix)

app.include_router(api)
app.include_router(frontend.router)

# Static frontend last so it never shadows API routes
_static = Path(settings.static_dir)
if _static.is_dir():
    app.mount("/", StaticFiles(directory=str(_static), html=True), name="static")
else:
    log.info("Static directory %s not found; frontend not mounted", _static)
