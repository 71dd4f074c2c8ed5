"""
Recent activity feed, enriched with user and vehicle summaries.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.database import get_db
from riderlink.core.deps import get_current_user
from riderlink.models.models import User
from riderlink.repositories.repositories import ActivityLogRepository, UserRepository, VehicleRepository
from riderlink.schemas.schemas import ActivityLogOut, UserSummary, VehicleSummary

router = APIRouter(prefix="/activity-logs", tags=["Activity"])


@router.get("", response_model=list[ActivityLogOut])
async def list_activity(
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entries = await ActivityLogRepository(db).list_recent(limit)

    # One batched lookup per table instead of one per entry.
    users = await UserRepository(db).get_many(e.user_id for e in entries)
    vehicles = await VehicleRepository(db).get_many(e.vehicle_id for e in entries)

    feed = []
    for entry in entries:
        item = ActivityLogOut.model_validate(entry)
        user = users.get(entry.user_id)
        vehicle = vehicles.get(entry.vehicle_id)
        item.user = UserSummary.model_validate(user) if user else None
        item.vehicle = VehicleSummary.model_validate(vehicle) if vehicle else None
        feed.append(item)
    return feed
