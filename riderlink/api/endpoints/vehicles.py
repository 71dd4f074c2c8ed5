"""
riderlink/api/endpoints/vehicles.py
────────────────────────────────────
Vehicle registry and assignment.

Reads need a session; create, update and assign need a manager role.
Create and update append an activity entry after the write commits (best
effort). Assignment logs inside its own transaction. A unique-key collision
that slips past the lookup surfaces from the database and maps to 409 too.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.database import get_db
from riderlink.core.deps import get_current_user, get_path_vehicle
from riderlink.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from riderlink.core.roles import require_manager
from riderlink.models.models import User, Vehicle, VehicleStatus
from riderlink.repositories.repositories import UserRepository, VehicleRepository
from riderlink.schemas.schemas import VehicleAssign, VehicleCreate, VehicleOut, VehicleUpdate
from riderlink.services.activity import ActivityAction, record_activity

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


async def _check_assignee(db: AsyncSession, user_id: Optional[int], field: str) -> None:
    if user_id is not None and not await UserRepository(db).get(user_id):
        raise ValidationFailedError.for_field(field, f"User with ID {user_id} does not exist")


@router.get("", response_model=list[VehicleOut])
async def list_vehicles(
    status: Optional[VehicleStatus] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await VehicleRepository(db).list(status=status)


@router.post("", response_model=VehicleOut, status_code=201)
async def create_vehicle(
    payload: VehicleCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    repo = VehicleRepository(db)
    if await repo.get_by_vehicle_id(payload.vehicle_id):
        raise ConflictError(f"Vehicle {payload.vehicle_id} already exists", field="vehicleId")
    await _check_assignee(db, payload.assigned_to, "assignedTo")

    try:
        vehicle = await repo.create(**payload.model_dump())
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"Vehicle {payload.vehicle_id} already exists", field="vehicleId")
    out = VehicleOut.model_validate(vehicle)
    await record_activity(
        db,
        ActivityAction.VEHICLE_CREATED,
        f"Vehicle {vehicle.vehicle_id} was created",
        user_id=current_user.id,
        vehicle_id=vehicle.id,
    )
    return out


@router.get("/{vehicle_id}", response_model=VehicleOut)
async def get_vehicle(
    current_user: User = Depends(get_current_user),
    vehicle: Vehicle = Depends(get_path_vehicle),
):
    return vehicle


@router.put("/{vehicle_id}", response_model=VehicleOut)
async def update_vehicle(
    vehicle_id: int,
    payload: VehicleUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    repo = VehicleRepository(db)
    vehicle = await repo.get(vehicle_id)
    if not vehicle:
        raise NotFoundError("Vehicle", vehicle_id)

    data = payload.model_dump(exclude_unset=True)
    code = data.get("vehicle_id")
    if code is not None and code != vehicle.vehicle_id and await repo.get_by_vehicle_id(code):
        raise ConflictError(f"Vehicle {code} already exists", field="vehicleId")
    await _check_assignee(db, data.get("assigned_to"), "assignedTo")

    try:
        vehicle = await repo.update(vehicle, data)
    except IntegrityError:
        await db.rollback()
        if code is None:
            raise
        raise ConflictError(f"Vehicle {code} already exists", field="vehicleId")
    out = VehicleOut.model_validate(vehicle)
    await record_activity(
        db,
        ActivityAction.VEHICLE_UPDATED,
        f"Vehicle {vehicle.vehicle_id} was updated",
        user_id=current_user.id,
        vehicle_id=vehicle.id,
    )
    return out


@router.post("/{vehicle_id}/assign", response_model=VehicleOut)
async def assign_vehicle(
    vehicle_id: int,
    payload: VehicleAssign,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    repo = VehicleRepository(db)
    if not await repo.get(vehicle_id):
        raise NotFoundError("Vehicle", vehicle_id)
    await _check_assignee(db, payload.user_id, "userId")

    vehicle = await repo.assign_to_user(vehicle_id, payload.user_id)
    if not vehicle:
        raise NotFoundError("Vehicle", vehicle_id)
    return vehicle
