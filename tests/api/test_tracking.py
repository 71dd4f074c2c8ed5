"""
tests/api/test_tracking.py
───────────────────────────
GPS pings and fuel reports: the rider-facing write paths.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from riderlink.core.config import settings
from riderlink.repositories.repositories import ActivityLogRepository

API = settings.API_PREFIX


# ─────────────────────────────────────────────────────────────────────────
# GPS
# ─────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_rider_records_gps_point(rider: AsyncClient, make_vehicle):
    vehicle = await make_vehicle()
    res = await rider.post(f"{API}/gps-locations", json={
        "vehicleId": vehicle.id, "latitude": 40.7128, "longitude": -74.0060, "speed": 30,
    })
    assert res.status_code == 201
    data = res.json()
    assert data["latitude"] == 40.7128
    assert data["speed"] == 30
    assert data["timestamp"]


@pytest.mark.asyncio
async def test_client_timestamp_is_ignored(rider: AsyncClient, make_vehicle):
    vehicle = await make_vehicle()
    res = await rider.post(f"{API}/gps-locations", json={
        "vehicleId": vehicle.id, "latitude": 1, "longitude": 2, "timestamp": "1999-01-01T00:00:00",
    })
    assert res.status_code == 201
    assert not res.json()["timestamp"].startswith("1999")


@pytest.mark.asyncio
async def test_out_of_range_coordinates_are_400(rider: AsyncClient, make_vehicle):
    vehicle = await make_vehicle()
    res = await rider.post(f"{API}/gps-locations", json={
        "vehicleId": vehicle.id, "latitude": 91, "longitude": -181,
    })
    assert res.status_code == 400
    fields = {e["field"] for e in res.json()["details"]["errors"]}
    assert fields == {"latitude", "longitude"}


@pytest.mark.asyncio
async def test_gps_for_unknown_vehicle_is_404(rider: AsyncClient):
    res = await rider.post(f"{API}/gps-locations", json={"vehicleId": 9999, "latitude": 0, "longitude": 0})
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_latest_location_is_last_inserted(rider: AsyncClient, make_vehicle):
    vehicle = await make_vehicle()
    ids = []
    for i in range(5):
        res = await rider.post(f"{API}/gps-locations", json={
            "vehicleId": vehicle.id, "latitude": 10 + i, "longitude": 20 + i,
        })
        ids.append(res.json()["id"])

    latest = await rider.get(f"{API}/vehicles/{vehicle.id}/latest-location")
    assert latest.status_code == 200
    assert latest.json()["id"] == ids[-1]

    history = await rider.get(f"{API}/vehicles/{vehicle.id}/gps-locations")
    assert [p["id"] for p in history.json()] == list(reversed(ids))

    limited = await rider.get(f"{API}/vehicles/{vehicle.id}/gps-locations", params={"limit": 2})
    assert [p["id"] for p in limited.json()] == [ids[-1], ids[-2]]


@pytest.mark.asyncio
async def test_latest_location_without_points_is_404(rider: AsyncClient, make_vehicle):
    vehicle = await make_vehicle()
    res = await rider.get(f"{API}/vehicles/{vehicle.id}/latest-location")
    assert res.status_code == 404
    assert res.json()["error_code"] == "ERR_NOT_FOUND_001"


@pytest.mark.asyncio
async def test_history_for_unknown_vehicle_is_404(rider: AsyncClient):
    res = await rider.get(f"{API}/vehicles/9999/gps-locations")
    assert res.status_code == 404


# ─────────────────────────────────────────────────────────────────────────
# Fuel
# ─────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_fuel_report_uses_session_user(rider: AsyncClient, make_user, make_vehicle):
    someone_else = await make_user()
    vehicle = await make_vehicle()
    me = (await rider.get(f"{API}/auth/me")).json()

    res = await rider.post(f"{API}/fuel-reports", json={
        "vehicleId": vehicle.id, "amount": 8500, "cost": 1275, "odometer": 15230,
        "userId": someone_else.id,
    })
    assert res.status_code == 201
    data = res.json()
    assert data["userId"] == me["id"]
    assert data["amount"] == 8500

    entries = (await rider.get(f"{API}/activity-logs")).json()
    assert [e["action"] for e in entries] == ["fuel_reported"]
    assert entries[0]["description"] == f"Fuel report submitted for vehicle ID {vehicle.id}"
    assert entries[0]["user"] == {"id": me["id"], "firstName": "Test", "lastName": "User"}


async def _broken_log(self, **fields):
    raise SQLAlchemyError("disk full")


@pytest.mark.asyncio
async def test_fuel_report_stands_when_activity_log_fails(rider: AsyncClient, make_vehicle, monkeypatch):
    vehicle = await make_vehicle()
    monkeypatch.setattr(ActivityLogRepository, "create", _broken_log)

    res = await rider.post(f"{API}/fuel-reports", json={
        "vehicleId": vehicle.id, "amount": 8500, "cost": 1275, "odometer": 15230,
    })
    assert res.status_code == 201, res.text
    assert res.json()["odometer"] == 15230

    res = await rider.get(f"{API}/vehicles/{vehicle.id}/fuel-reports")
    assert len(res.json()) == 1


@pytest.mark.asyncio
async def test_fuel_report_validation(rider: AsyncClient, make_vehicle):
    vehicle = await make_vehicle()
    res = await rider.post(f"{API}/fuel-reports", json={
        "vehicleId": vehicle.id, "amount": 0, "cost": -1,
    })
    assert res.status_code == 400
    fields = {e["field"] for e in res.json()["details"]["errors"]}
    assert fields == {"amount", "cost", "odometer"}

    listing = await rider.get(f"{API}/vehicles/{vehicle.id}/fuel-reports")
    assert listing.json() == []


@pytest.mark.asyncio
async def test_fuel_report_unknown_vehicle_is_404(rider: AsyncClient):
    res = await rider.post(f"{API}/fuel-reports", json={
        "vehicleId": 9999, "amount": 100, "cost": 100, "odometer": 1,
    })
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_fuel_reports_for_vehicle_newest_first(rider: AsyncClient, make_vehicle):
    vehicle = await make_vehicle()
    other = await make_vehicle()
    ids = []
    for odometer in (100, 200):
        res = await rider.post(f"{API}/fuel-reports", json={
            "vehicleId": vehicle.id, "amount": 5000, "cost": 700, "odometer": odometer,
        })
        ids.append(res.json()["id"])
    await rider.post(f"{API}/fuel-reports", json={
        "vehicleId": other.id, "amount": 5000, "cost": 700, "odometer": 1,
    })

    res = await rider.get(f"{API}/vehicles/{vehicle.id}/fuel-reports")
    assert [r["id"] for r in res.json()] == list(reversed(ids))
