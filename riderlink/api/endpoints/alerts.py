"""
Alerts: unread inbox, raising, and mark-as-read (one-way).
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.database import get_db
from riderlink.core.deps import ensure_vehicle, get_current_user
from riderlink.core.exceptions import NotFoundError
from riderlink.core.roles import require_manager
from riderlink.models.models import User
from riderlink.repositories.repositories import AlertRepository
from riderlink.schemas.schemas import AlertCreate, AlertOut

router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.get("", response_model=list[AlertOut])
async def list_unread_alerts(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await AlertRepository(db).list_unread()


@router.post("", response_model=AlertOut, status_code=201, dependencies=[Depends(require_manager)])
async def raise_alert(payload: AlertCreate, db: AsyncSession = Depends(get_db)):
    if payload.vehicle_id is not None:
        await ensure_vehicle(db, payload.vehicle_id)
    return await AlertRepository(db).create(**payload.model_dump())


@router.post("/{alert_id}/read", response_model=AlertOut)
async def mark_alert_read(
    alert_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    alert = await AlertRepository(db).mark_read(alert_id)
    if not alert:
        raise NotFoundError("Alert", alert_id)
    return alert
