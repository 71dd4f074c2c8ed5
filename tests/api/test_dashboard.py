"""
tests/api/test_dashboard.py
────────────────────────────
Dashboard summary counts and the enriched activity feed.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from riderlink.core.config import settings
from riderlink.models.models import UserRole, utcnow
from riderlink.repositories.repositories import ActivityLogRepository, AlertRepository, MaintenanceRepository

API = settings.API_PREFIX


@pytest.mark.asyncio
async def test_empty_summary(rider: AsyncClient):
    res = await rider.get(f"{API}/dashboard/summary")
    assert res.status_code == 200
    assert res.json() == {
        "totalVehicles": 0,
        "activeRiders": 1,  # the caller
        "maintenanceDue": 0,
        "alerts": 0,
        "vehicleStatusCounts": {"available": 0, "inUse": 0, "maintenance": 0, "serviceDue": 0},
    }


@pytest.mark.asyncio
async def test_summary_counts(app_ctx, supervisor: AsyncClient, make_user, make_vehicle):
    await make_user(role=UserRole.rider)
    await make_user(role=UserRole.rider, active=False)
    await make_user(role=UserRole.admin)

    v1 = await make_vehicle(status="available")
    await make_vehicle(status="in_use")
    await make_vehicle(status="in_use")
    await make_vehicle(status="service_due")

    now = utcnow()
    async with app_ctx.state.database.session() as db:
        maintenance = MaintenanceRepository(db)
        await maintenance.create(vehicle_id=v1.id, type="Oil", description="x", scheduled_date=now + timedelta(days=3))
        await maintenance.create(vehicle_id=v1.id, type="Oil", description="x", scheduled_date=now - timedelta(days=3))
        alerts = AlertRepository(db)
        await alerts.create(vehicle_id=v1.id, type="idle_time", message="idle")
        read = await alerts.create(vehicle_id=v1.id, type="idle_time", message="idle")
        await alerts.mark_read(read.id)

    res = await supervisor.get(f"{API}/dashboard/summary")
    assert res.json() == {
        "totalVehicles": 4,
        "activeRiders": 1,
        "maintenanceDue": 1,
        "alerts": 1,
        "vehicleStatusCounts": {"available": 1, "inUse": 2, "maintenance": 0, "serviceDue": 1},
    }


@pytest.mark.asyncio
async def test_activity_feed_enrichment(app_ctx, rider: AsyncClient, make_user, make_vehicle):
    user = await make_user(first_name="John", last_name="Smith")
    vehicle = await make_vehicle("MBK-1023", make="Yamaha", model="YBR 125")

    async with app_ctx.state.database.session() as db:
        repo = ActivityLogRepository(db)
        await repo.create(user_id=user.id, vehicle_id=vehicle.id, action="vehicle_checkout", description="out")
        await repo.create(action="system", description="no references")

    entries = (await rider.get(f"{API}/activity-logs")).json()
    assert [e["action"] for e in entries] == ["system", "vehicle_checkout"]
    assert entries[0]["user"] is None
    assert entries[0]["vehicle"] is None
    assert entries[1]["user"] == {"id": user.id, "firstName": "John", "lastName": "Smith"}
    assert entries[1]["vehicle"] == {"id": vehicle.id, "vehicleId": "MBK-1023", "make": "Yamaha", "model": "YBR 125"}


@pytest.mark.asyncio
async def test_activity_feed_limit(app_ctx, rider: AsyncClient):
    async with app_ctx.state.database.session() as db:
        repo = ActivityLogRepository(db)
        for i in range(15):
            await repo.create(action="ping", description=f"#{i}")

    assert len((await rider.get(f"{API}/activity-logs")).json()) == 10
    limited = (await rider.get(f"{API}/activity-logs", params={"limit": 3})).json()
    assert [e["description"] for e in limited] == ["#14", "#13", "#12"]

    res = await rider.get(f"{API}/activity-logs", params={"limit": 0})
    assert res.status_code == 400
    assert res.json()["details"]["errors"][0]["field"] == "limit"
