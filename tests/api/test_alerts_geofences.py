"""
tests/api/test_alerts_geofences.py
───────────────────────────────────
Alert inbox (unread only, one-way read flag) and manager-only geofences.
"""

import json

import pytest
from httpx import AsyncClient

from riderlink.core.config import settings

API = settings.API_PREFIX

SQUARE = [[40.0, -74.0], [40.0, -73.9], [40.1, -73.9], [40.1, -74.0]]


# ─────────────────────────────────────────────────────────────────────────
# Alerts
# ─────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_raise_and_read_alert(supervisor: AsyncClient, rider: AsyncClient, make_vehicle):
    vehicle = await make_vehicle()
    res = await supervisor.post(f"{API}/alerts", json={
        "vehicleId": vehicle.id, "type": "speed_limit", "message": "Speed limit exceeded",
    })
    assert res.status_code == 201
    alert = res.json()
    assert alert["read"] is False

    unread = (await rider.get(f"{API}/alerts")).json()
    assert [a["id"] for a in unread] == [alert["id"]]

    res = await rider.post(f"{API}/alerts/{alert['id']}/read")
    assert res.status_code == 200
    assert res.json()["read"] is True
    assert (await rider.get(f"{API}/alerts")).json() == []

    # Marking again is a no-op, never a toggle.
    res = await rider.post(f"{API}/alerts/{alert['id']}/read")
    assert res.status_code == 200
    assert res.json()["read"] is True


@pytest.mark.asyncio
async def test_unread_alerts_newest_first(supervisor: AsyncClient):
    ids = []
    for msg in ("first", "second", "third"):
        res = await supervisor.post(f"{API}/alerts", json={"type": "idle_time", "message": msg})
        ids.append(res.json()["id"])

    res = await supervisor.get(f"{API}/alerts")
    assert [a["id"] for a in res.json()] == list(reversed(ids))


@pytest.mark.asyncio
async def test_read_unknown_alert_is_404(rider: AsyncClient):
    res = await rider.post(f"{API}/alerts/9999/read")
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_rider_cannot_raise_alert(rider: AsyncClient):
    res = await rider.post(f"{API}/alerts", json={"type": "idle_time", "message": "x"})
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_alert_type_is_validated(supervisor: AsyncClient):
    res = await supervisor.post(f"{API}/alerts", json={"type": "meteor", "message": "x"})
    assert res.status_code == 400
    assert res.json()["details"]["errors"][0]["field"] == "type"


@pytest.mark.asyncio
async def test_alert_for_unknown_vehicle_is_404(supervisor: AsyncClient):
    res = await supervisor.post(f"{API}/alerts", json={"vehicleId": 9999, "type": "idle_time", "message": "x"})
    assert res.status_code == 404


# ─────────────────────────────────────────────────────────────────────────
# Geofences
# ─────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_and_get_geofence(supervisor: AsyncClient):
    res = await supervisor.post(f"{API}/geofences", json={"name": "Depot", "coordinates": SQUARE})
    assert res.status_code == 201
    fence = res.json()
    assert json.loads(fence["coordinates"]) == SQUARE
    assert fence["active"] is True
    me = (await supervisor.get(f"{API}/auth/me")).json()
    assert fence["createdBy"] == me["id"]

    res = await supervisor.get(f"{API}/geofences/{fence['id']}")
    assert res.status_code == 200
    assert res.json()["name"] == "Depot"

    listing = (await supervisor.get(f"{API}/geofences")).json()
    assert [g["id"] for g in listing] == [fence["id"]]


@pytest.mark.asyncio
async def test_geofence_accepts_json_string_and_objects(supervisor: AsyncClient):
    res = await supervisor.post(f"{API}/geofences", json={"name": "A", "coordinates": json.dumps(SQUARE)})
    assert res.status_code == 201

    points = [{"lat": lat, "lng": lng} for lat, lng in SQUARE]
    res = await supervisor.post(f"{API}/geofences", json={"name": "B", "coordinates": points})
    assert res.status_code == 201
    assert json.loads(res.json()["coordinates"]) == SQUARE


@pytest.mark.asyncio
async def test_geofence_polygon_needs_three_points(supervisor: AsyncClient):
    res = await supervisor.post(f"{API}/geofences", json={"name": "Line", "coordinates": SQUARE[:2]})
    assert res.status_code == 400
    assert res.json()["details"]["errors"][0]["field"] == "coordinates"
    assert (await supervisor.get(f"{API}/geofences")).json() == []


@pytest.mark.asyncio
async def test_update_geofence_is_partial(supervisor: AsyncClient):
    fence = (await supervisor.post(f"{API}/geofences", json={"name": "Depot", "coordinates": SQUARE})).json()

    res = await supervisor.put(f"{API}/geofences/{fence['id']}", json={"active": False})
    assert res.status_code == 200
    data = res.json()
    assert data["active"] is False
    assert data["name"] == "Depot"
    assert data["coordinates"] == fence["coordinates"]


@pytest.mark.asyncio
async def test_unknown_geofence_is_404(supervisor: AsyncClient):
    assert (await supervisor.get(f"{API}/geofences/9999")).status_code == 404
    assert (await supervisor.put(f"{API}/geofences/9999", json={"name": "x"})).status_code == 404


@pytest.mark.asyncio
async def test_geofences_are_manager_only(rider: AsyncClient):
    assert (await rider.get(f"{API}/geofences")).status_code == 403
    res = await rider.post(f"{API}/geofences", json={"name": "Depot", "coordinates": SQUARE})
    assert res.status_code == 403
