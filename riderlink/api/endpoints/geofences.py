"""
Geofence polygons. Manager roles only.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.database import get_db
from riderlink.core.exceptions import NotFoundError
from riderlink.core.roles import require_manager
from riderlink.models.models import User
from riderlink.repositories.repositories import GeofenceRepository
from riderlink.schemas.schemas import GeofenceCreate, GeofenceOut, GeofenceUpdate

router = APIRouter(prefix="/geofences", tags=["Geofences"])


@router.get("", response_model=list[GeofenceOut], dependencies=[Depends(require_manager)])
async def list_geofences(db: AsyncSession = Depends(get_db)):
    return await GeofenceRepository(db).list()


@router.post("", response_model=GeofenceOut, status_code=201)
async def create_geofence(
    payload: GeofenceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    return await GeofenceRepository(db).create(created_by=current_user.id, **payload.model_dump())


@router.get("/{geofence_id}", response_model=GeofenceOut, dependencies=[Depends(require_manager)])
async def get_geofence(geofence_id: int, db: AsyncSession = Depends(get_db)):
    geofence = await GeofenceRepository(db).get(geofence_id)
    if not geofence:
        raise NotFoundError("Geofence", geofence_id)
    return geofence


@router.put("/{geofence_id}", response_model=GeofenceOut, dependencies=[Depends(require_manager)])
async def update_geofence(geofence_id: int, payload: GeofenceUpdate, db: AsyncSession = Depends(get_db)):
    repo = GeofenceRepository(db)
    geofence = await repo.get(geofence_id)
    if not geofence:
        raise NotFoundError("Geofence", geofence_id)
    return await repo.update(geofence, payload.model_dump(exclude_unset=True))
