# alembic/env.py
from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import create_engine, pool

load_dotenv(override=False)

from movie_catalog.database import ASYNC_DSN       # noqa: E402
from movie_catalog.db_models import Base           # noqa: E402

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def migration_url() -> str:
    """The app runs on asyncpg / aiosqlite; migrations use the sync drivers."""
    url = os.getenv("ALEMBIC_SYNC_URL") or ASYNC_DSN
    return url.replace("+asyncpg", "+psycopg").replace("+aiosqlite", "")


config.set_main_option("sqlalchemy.url", migration_url())


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(config.get_main_option("sqlalchemy.url"), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
