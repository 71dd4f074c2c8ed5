"""
GPS pings and per-vehicle location history.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.database import get_db
from riderlink.core.deps import ensure_vehicle, get_current_user, get_path_vehicle
from riderlink.core.exceptions import NotFoundError
from riderlink.models.models import User, Vehicle
from riderlink.repositories.repositories import GpsLocationRepository
from riderlink.schemas.schemas import GpsLocationCreate, GpsLocationOut

router = APIRouter(tags=["GPS"])


@router.post("/gps-locations", response_model=GpsLocationOut, status_code=201)
async def record_location(
    payload: GpsLocationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await ensure_vehicle(db, payload.vehicle_id)
    return await GpsLocationRepository(db).create(**payload.model_dump())


@router.get("/vehicles/{vehicle_id}/gps-locations", response_model=list[GpsLocationOut])
async def list_locations(
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    vehicle: Vehicle = Depends(get_path_vehicle),
):
    return await GpsLocationRepository(db).list_for_vehicle(vehicle.id, limit=limit)


@router.get("/vehicles/{vehicle_id}/latest-location", response_model=GpsLocationOut)
async def latest_location(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    vehicle: Vehicle = Depends(get_path_vehicle),
):
    location = await GpsLocationRepository(db).latest_for_vehicle(vehicle.id)
    if not location:
        raise NotFoundError("GPS location for vehicle", vehicle.id)
    return location
