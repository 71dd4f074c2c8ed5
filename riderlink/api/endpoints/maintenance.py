"""
Maintenance scheduling and completion.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.database import get_db
from riderlink.core.deps import ensure_vehicle, get_current_user
from riderlink.core.exceptions import NotFoundError
from riderlink.core.roles import require_manager
from riderlink.models.models import User, utcnow
from riderlink.repositories.repositories import MaintenanceRepository
from riderlink.schemas.schemas import MaintenanceComplete, MaintenanceCreate, MaintenanceOut
from riderlink.services.activity import ActivityAction, record_activity

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


@router.get("", response_model=list[MaintenanceOut])
async def list_maintenance(
    vehicle_id: Optional[int] = Query(default=None, alias="vehicleId"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """History for one vehicle when `vehicleId` is given, otherwise fleet-wide upcoming work."""
    repo = MaintenanceRepository(db)
    if vehicle_id is not None:
        return await repo.list_for_vehicle(vehicle_id)
    return await repo.list_upcoming()


@router.post("", response_model=MaintenanceOut, status_code=201)
async def schedule_maintenance(
    payload: MaintenanceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    await ensure_vehicle(db, payload.vehicle_id)

    record = await MaintenanceRepository(db).create(created_by=current_user.id, **payload.model_dump())
    out = MaintenanceOut.model_validate(record)
    await record_activity(
        db,
        ActivityAction.MAINTENANCE_SCHEDULED,
        f"Maintenance scheduled for vehicle ID {record.vehicle_id}",
        user_id=current_user.id,
        vehicle_id=record.vehicle_id,
    )
    return out


@router.put("/{maintenance_id}/complete", response_model=MaintenanceOut)
async def complete_maintenance(
    maintenance_id: int,
    payload: Optional[MaintenanceComplete] = Body(default=None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    """Marks the record complete and returns the vehicle to service in one transaction."""
    payload = payload or MaintenanceComplete()
    record = await MaintenanceRepository(db).complete(
        maintenance_id,
        completed_date=payload.completed_date or utcnow(),
        notes=payload.notes,
        actor_id=current_user.id,
    )
    if not record:
        raise NotFoundError("Maintenance record", maintenance_id)
    return record
