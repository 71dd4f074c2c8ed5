"""
riderlink/core/database.py
───────────────────────────
Async SQLAlchemy engine + session lifecycle.

A single `Database` is built in the application lifespan and hung on
`app.state.database`; nothing here is a module-level engine. The default URL
is an in-memory SQLite database, which lives on one shared connection
(StaticPool) and disappears with the process.

Concurrency rule: on SQLite every session holds `Database.lock` for its whole
lifetime, so units of work never interleave on the shared connection. Real
databases rely on their own transactions plus SELECT ... FOR UPDATE in the
composite operations.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

log = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class Database:
    def __init__(self, url: str, *, timeout: float = 5.0, echo: bool = False):
        self.url = url
        self.timeout = timeout
        self.is_sqlite = url.startswith("sqlite")

        engine_kwargs: dict = {"echo": echo}
        if self.is_sqlite:
            engine_kwargs.update(
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
            info={"timeout": timeout},
        )
        self.lock = asyncio.Lock()

    async def create_all(self) -> None:
        # Make sure every model is registered on Base.metadata.
        import riderlink.models.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("Schema created on %s", self.engine.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self.is_sqlite:
            async with self.lock:
                async with self.session_factory() as session:
                    yield session
        else:
            async with self.session_factory() as session:
                yield session


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    """Request-scoped session; uncommitted work is rolled back on close."""
    async with database.session() as session:
        yield session
