import os
import uuid

# ── Environment Overrides ───────────────────────────────────────────
os.environ["SECRET_KEY"] = "riderlink-test-secret-key-0123456789abcdef"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SEED_DEMO_DATA"] = "False"
os.environ["AUTO_CREATE_SCHEMA"] = "True"
os.environ["TESTING"] = "True"
os.environ["LOG_LEVEL"] = "WARNING"
# ────────────────────────────────────────────────────────────────────

import pytest
from httpx import ASGITransport, AsyncClient

from riderlink.core.config import settings
from riderlink.core.database import Database
from riderlink.core.security import hash_password
from riderlink.core.startup import lifespan
from riderlink.main import app
from riderlink.models.models import UserRole
from riderlink.repositories.repositories import UserRepository, VehicleRepository

API = settings.API_PREFIX
PASSWORD = "password123"


@pytest.fixture
async def app_ctx():
    """Runs the real lifespan: every test gets a fresh in-memory store."""
    async with lifespan(app):
        yield app


@pytest.fixture
async def client(app_ctx):
    async with AsyncClient(
        transport=ASGITransport(app=app_ctx),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def make_user(app_ctx):
    async def _make(email=None, *, role=UserRole.rider, password=PASSWORD, active=True,
                    first_name="Test", last_name="User"):
        email = email or f"{role.value}-{uuid.uuid4().hex[:8]}@riderlink.com"
        async with app_ctx.state.database.session() as db:
            return await UserRepository(db).create(
                email=email,
                hashed_password=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                role=role,
                active=active,
            )
    return _make


@pytest.fixture
def make_vehicle(app_ctx):
    async def _make(code=None, **overrides):
        fields = {
            "vehicle_id": code or f"MBK-{uuid.uuid4().hex[:6]}",
            "make": "Honda",
            "model": "CBF 150",
            "year": 2021,
            "license_plate": "DEF456",
            "vin": "1HGCM82633A654321",
        }
        fields.update(overrides)
        async with app_ctx.state.database.session() as db:
            return await VehicleRepository(db).create(**fields)
    return _make


@pytest.fixture
async def login_as(app_ctx, make_user):
    """Factory: a fresh user with the given role and a client holding their session cookie."""
    clients = []

    async def _login(role=UserRole.rider, email=None):
        user = await make_user(email, role=role)
        ac = AsyncClient(transport=ASGITransport(app=app_ctx), base_url="http://test")
        clients.append(ac)
        res = await ac.post(f"{API}/auth/login", json={"email": user.email, "password": PASSWORD})
        assert res.status_code == 200, res.text
        return ac

    yield _login
    for ac in clients:
        await ac.aclose()


@pytest.fixture
async def admin(login_as):
    return await login_as(UserRole.admin)


@pytest.fixture
async def supervisor(login_as):
    return await login_as(UserRole.fleet_supervisor)


@pytest.fixture
async def rider(login_as):
    return await login_as(UserRole.rider)


# ── Repository-level fixtures (no HTTP) ─────────────────────────────

@pytest.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:", timeout=5.0)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as s:
        yield s
