# movie_catalog/database.py
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from movie_catalog.core.settings import settings


def _to_async_driver(url: str) -> str:
    """
    Ensure the SQLAlchemy URL uses an async driver.
    - postgres://            -> postgresql+asyncpg://
    - postgresql://          -> postgresql+asyncpg://
    - postgresql+psycopg://  -> postgresql+asyncpg://
    - anything else (sqlite+aiosqlite://, postgresql+asyncpg://) -> as is
    """
    u = (url or "").strip().strip('"').strip("'")
    if u.startswith("postgres://"):
        u = "postgresql://" + u[len("postgres://"):]
    if u.startswith("postgresql+psycopg://"):
        return "postgresql+asyncpg://" + u[len("postgresql+psycopg://"):]
    if u.startswith("postgresql://"):
        return "postgresql+asyncpg://" + u[len("postgresql://"):]
    return u


ASYNC_DSN = _to_async_driver(settings.database_url)

async_engine = create_async_engine(ASYNC_DSN, future=True, pool_pre_ping=True)
AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=async_engine, expire_on_commit=False, autoflush=False
)


# FastAPI dependency
async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
