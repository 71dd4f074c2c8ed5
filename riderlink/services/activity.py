"""
riderlink/services/activity.py
───────────────────────────────
Activity-log side effects written after a primary write has committed.

Best-effort: a failed log write is logged and rolled back, never raised, so
the primary write the caller already committed stands on its own. The
rollback expires every object in the session; callers snapshot their
response before recording. Composite
repository operations (assignment, maintenance completion) stage their entry
inside their own transaction instead and do not come through here.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.exceptions import RepositoryTimeoutError
from riderlink.models.models import ActivityLog
from riderlink.repositories.repositories import ActivityLogRepository

log = logging.getLogger(__name__)


class ActivityAction:
    VEHICLE_CREATED       = "vehicle_created"
    VEHICLE_UPDATED       = "vehicle_updated"
    VEHICLE_ASSIGNED      = "vehicle_assigned"
    MAINTENANCE_SCHEDULED = "maintenance_scheduled"
    MAINTENANCE_COMPLETED = "maintenance_completed"
    FUEL_REPORTED         = "fuel_reported"


async def record_activity(
    db: AsyncSession,
    action: str,
    description: str,
    *,
    user_id: Optional[int] = None,
    vehicle_id: Optional[int] = None,
) -> Optional[ActivityLog]:
    try:
        return await ActivityLogRepository(db).create(
            user_id=user_id,
            vehicle_id=vehicle_id,
            action=action,
            description=description,
        )
    except (SQLAlchemyError, RepositoryTimeoutError):
        log.exception("Failed to record activity %r for vehicle=%s user=%s", action, vehicle_id, user_id)
        await db.rollback()
        return None
