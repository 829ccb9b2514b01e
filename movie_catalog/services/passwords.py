# movie_catalog/services/passwords.py
from __future__ import annotations

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from movie_catalog.core.settings import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


async def hash_password(plain: str) -> str:
    # bcrypt is CPU bound; keep it off the event loop
    return await run_in_threadpool(pwd_context.hash, plain)


async def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return await run_in_threadpool(pwd_context.verify, plain, hashed)
    except (ValueError, TypeError):
        # malformed / unknown hash format
        return False
