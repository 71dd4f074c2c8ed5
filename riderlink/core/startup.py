import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from riderlink.core.config import settings
from riderlink.core.database import Database
from riderlink.core.security import SessionRevocationList
from riderlink.services.seed import seed_demo_data

log = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────────────
    configure_logging()

    # 1. Storage
    database = Database(
        settings.DATABASE_URL,
        timeout=settings.REPOSITORY_TIMEOUT_SECONDS,
        echo=settings.DEBUG,
    )
    if settings.AUTO_CREATE_SCHEMA:
        await database.create_all()
    app.state.database = database
    app.state.revoked_sessions = SessionRevocationList()

    # 2. Demo data
    if settings.SEED_DEMO_DATA:
        async with database.session() as db:
            await seed_demo_data(db)

    log.info("RiderLink started (storage=%s)", "in-memory" if ":memory:" in settings.DATABASE_URL else "external")

    yield  # Application runs here

    # ── Shutdown ─────────────────────────────────────────────────────────
    await database.dispose()
    log.info("RiderLink shutting down.")
