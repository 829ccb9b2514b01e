# movie_catalog/tests/conftest.py
import os

# Must be set before movie_catalog.core.settings is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ["REDIS_URL"] = ""

import fakeredis.aioredis  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from movie_catalog.database import get_async_db  # noqa: E402
from movie_catalog.db.crud import users as user_store  # noqa: E402
from movie_catalog.db_models import Base  # noqa: E402
from movie_catalog.main import app  # noqa: E402


@pytest.fixture(autouse=True)
async def fake_app_cache(monkeypatch):
    """
    Ensure movie_catalog.infra.cache uses a FakeRedis client in tests.
    Works whether code reads cache._redis directly or calls cache.init(...).
    """
    fake = fakeredis.aioredis.FakeRedis(decode_responses=True)

    import movie_catalog.infra.cache as app_cache
    monkeypatch.setattr(app_cache, "_redis", fake, raising=True)

    import redis.asyncio as redis_asyncio
    monkeypatch.setattr(redis_asyncio, "from_url", lambda *a, **k: fake, raising=True)

    try:
        yield fake
    finally:
        await fake.aclose()


@pytest.fixture
async def engine():
    # one shared in-memory connection so every session sees the same tables
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def users(db):
    """Two stored users (hashes are placeholders; these are not used for login)."""
    alice = await user_store.create_user(db, "alice", "alice@x.com", "$2b$04$placeholder-alice")
    bob = await user_store.create_user(db, "bob", "bob@x.com", "$2b$04$placeholder-bob")
    return alice, bob


@pytest.fixture
def override_db(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = _get_db
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_async_db, None)


@pytest.fixture
async def client(override_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
async def other_client(override_db):
    """Second browser with its own cookie jar."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
