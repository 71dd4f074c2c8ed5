"""
Alembic env for the RiderLink schema (async SQLAlchemy).

The target URL is `config.attributes["database_url"]` when a caller supplies
one programmatically, otherwise settings.DATABASE_URL. An in-memory SQLite
URL is refused: the schema would vanish with the migration's connection.
"""
import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from riderlink.core.config import settings
from riderlink.core.database import Base

# register every table on Base.metadata
import riderlink.models.models  # noqa: F401

config = context.config

database_url = config.attributes.get("database_url") or settings.DATABASE_URL
if ":memory:" in database_url:
    raise RuntimeError(
        "Refusing to migrate an in-memory database; set DATABASE_URL to a file or server URL"
    )
config.set_main_option("sqlalchemy.url", database_url)

if config.config_file_name is not None:                  # pragma: no cover
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    # SQLite cannot ALTER most constraints in place; batch mode rebuilds tables.
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=database_url.startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
