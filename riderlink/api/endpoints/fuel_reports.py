"""
Fuel purchase reports. The reporting user is always the session user.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.database import get_db
from riderlink.core.deps import ensure_vehicle, get_current_user, get_path_vehicle
from riderlink.models.models import User, Vehicle
from riderlink.repositories.repositories import FuelReportRepository
from riderlink.schemas.schemas import FuelReportCreate, FuelReportOut
from riderlink.services.activity import ActivityAction, record_activity

router = APIRouter(tags=["Fuel"])


@router.post("/fuel-reports", response_model=FuelReportOut, status_code=201)
async def submit_fuel_report(
    payload: FuelReportCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await ensure_vehicle(db, payload.vehicle_id)

    report = await FuelReportRepository(db).create(user_id=current_user.id, **payload.model_dump())
    out = FuelReportOut.model_validate(report)
    await record_activity(
        db,
        ActivityAction.FUEL_REPORTED,
        f"Fuel report submitted for vehicle ID {report.vehicle_id}",
        user_id=current_user.id,
        vehicle_id=report.vehicle_id,
    )
    return out


@router.get("/vehicles/{vehicle_id}/fuel-reports", response_model=list[FuelReportOut])
async def list_fuel_reports(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    vehicle: Vehicle = Depends(get_path_vehicle),
):
    return await FuelReportRepository(db).list_for_vehicle(vehicle.id)
