# movie_catalog/scheduler.py
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy.exc import SQLAlchemyError

from movie_catalog.database import AsyncSessionLocal
from movie_catalog.db.crud.sessions import purge_expired_sessions

logger = logging.getLogger(__name__)

_scheduler: AsyncIOScheduler | None = None


async def sweep_expired_sessions() -> int:
    try:
        async with AsyncSessionLocal() as db:
            removed = await purge_expired_sessions(db)
    except SQLAlchemyError:
        logger.exception("Expired session sweep failed")
        return 0
    if removed:
        logger.info("Purged %s expired sessions", removed)
    return removed


def start_jobs(minutes: int) -> AsyncIOScheduler | None:
    global _scheduler
    if minutes <= 0:
        return None
    if _scheduler:
        return _scheduler
    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(sweep_expired_sessions, "interval", minutes=minutes, id="session_sweep")
    _scheduler.start()
    return _scheduler


def stop_jobs():
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
