"""
Repository layer: data access objects for all entities.
All repos accept an AsyncSession and return ORM models.

Lookups never raise for a missing id: they return None and the API layer
decides what that means. Every statement and commit is bounded by the
session's timeout (see Database).
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Iterable, Optional, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.config import settings
from riderlink.core.exceptions import RepositoryTimeoutError
from riderlink.models.models import (
    ActivityLog, Alert, FuelReport, Geofence, GpsLocation, Maintenance, User,
    Vehicle, VehicleStatus, utcnow,
)

log = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class BaseRepository:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.timeout: float = db.info.get("timeout", settings.REPOSITORY_TIMEOUT_SECONDS)

    async def _bounded(self, aw: Awaitable[T], operation: str) -> T:
        try:
            return await asyncio.wait_for(aw, timeout=self.timeout)
        except asyncio.TimeoutError:
            log.error("Repository %s.%s timed out after %.2fs", type(self).__name__, operation, self.timeout)
            raise RepositoryTimeoutError(operation, self.timeout)

    async def _execute(self, stmt):
        return await self._bounded(self.db.execute(stmt), "execute")

    async def _scalars(self, stmt) -> list:
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def _scalar_one_or_none(self, stmt):
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def _commit(self) -> None:
        await self._bounded(self.db.commit(), "commit")

    async def _commit_refresh(self, obj):
        await self._commit()
        await self._bounded(self.db.refresh(obj), "refresh")
        return obj

    async def _add(self, obj):
        self.db.add(obj)
        return await self._commit_refresh(obj)

    async def _patch(self, obj, data: dict[str, Any]):
        for key, value in data.items():
            setattr(obj, key, value)
        return await self._commit_refresh(obj)


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------

class UserRepository(BaseRepository):
    async def get(self, user_id: int) -> Optional[User]:
        return await self._scalar_one_or_none(select(User).where(User.id == user_id))

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._scalar_one_or_none(select(User).where(User.email == email))

    async def get_many(self, user_ids: Iterable[int]) -> dict[int, User]:
        ids = {i for i in user_ids if i is not None}
        if not ids:
            return {}
        users = await self._scalars(select(User).where(User.id.in_(ids)))
        return {u.id: u for u in users}

    async def create(self, **kwargs) -> User:
        return await self._add(User(**kwargs))

    async def update(self, user: User, data: dict[str, Any]) -> User:
        return await self._patch(user, data)

    async def list(self) -> list[User]:
        return await self._scalars(select(User).order_by(User.id))

    async def count(self) -> int:
        result = await self._execute(select(func.count(User.id)))
        return result.scalar() or 0


# ---------------------------------------------------------------------------
# Vehicle
# ---------------------------------------------------------------------------

class VehicleRepository(BaseRepository):
    async def get(self, vehicle_id: int, *, for_update: bool = False) -> Optional[Vehicle]:
        stmt = select(Vehicle).where(Vehicle.id == vehicle_id)
        if for_update:
            stmt = stmt.with_for_update()
        return await self._scalar_one_or_none(stmt)

    async def get_by_vehicle_id(self, code: str) -> Optional[Vehicle]:
        return await self._scalar_one_or_none(select(Vehicle).where(Vehicle.vehicle_id == code))

    async def get_many(self, vehicle_ids: Iterable[int]) -> dict[int, Vehicle]:
        ids = {i for i in vehicle_ids if i is not None}
        if not ids:
            return {}
        vehicles = await self._scalars(select(Vehicle).where(Vehicle.id.in_(ids)))
        return {v.id: v for v in vehicles}

    async def create(self, **kwargs) -> Vehicle:
        return await self._add(Vehicle(**kwargs))

    async def update(self, vehicle: Vehicle, data: dict[str, Any]) -> Vehicle:
        return await self._patch(vehicle, data)

    async def list(self, status: Optional[VehicleStatus] = None) -> list[Vehicle]:
        stmt = select(Vehicle)
        if status is not None:
            stmt = stmt.where(Vehicle.status == status)
        return await self._scalars(stmt.order_by(Vehicle.id))

    async def list_by_status(self, status: VehicleStatus) -> list[Vehicle]:
        return await self.list(status=status)

    async def assign_to_user(self, vehicle_id: int, user_id: int) -> Optional[Vehicle]:
        """
        Composite: assigned_to + status=in_use + one `vehicle_assigned`
        activity entry, committed together.
        """
        vehicle = await self.get(vehicle_id, for_update=True)
        if not vehicle:
            return None

        vehicle.assigned_to = user_id
        vehicle.status = VehicleStatus.in_use
        ActivityLogRepository(self.db).stage(
            user_id=user_id,
            vehicle_id=vehicle.id,
            action="vehicle_assigned",
            description=f"Vehicle {vehicle.vehicle_id} assigned to user ID {user_id}",
        )
        return await self._commit_refresh(vehicle)


# ---------------------------------------------------------------------------
# GPS location
# ---------------------------------------------------------------------------

class GpsLocationRepository(BaseRepository):
    async def create(self, **kwargs) -> GpsLocation:
        kwargs.pop("timestamp", None)  # always server-set
        return await self._add(GpsLocation(**kwargs))

    async def list_for_vehicle(self, vehicle_id: int, limit: Optional[int] = None) -> list[GpsLocation]:
        stmt = (
            select(GpsLocation)
            .where(GpsLocation.vehicle_id == vehicle_id)
            .order_by(GpsLocation.timestamp.desc(), GpsLocation.id.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        return await self._scalars(stmt)

    async def latest_for_vehicle(self, vehicle_id: int) -> Optional[GpsLocation]:
        locations = await self.list_for_vehicle(vehicle_id, limit=1)
        return locations[0] if locations else None


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------

class MaintenanceRepository(BaseRepository):
    async def get(self, maintenance_id: int, *, for_update: bool = False) -> Optional[Maintenance]:
        stmt = select(Maintenance).where(Maintenance.id == maintenance_id)
        if for_update:
            stmt = stmt.with_for_update()
        return await self._scalar_one_or_none(stmt)

    async def create(self, **kwargs) -> Maintenance:
        return await self._add(Maintenance(**kwargs))

    async def update(self, record: Maintenance, data: dict[str, Any]) -> Maintenance:
        return await self._patch(record, data)

    async def list_for_vehicle(self, vehicle_id: int) -> list[Maintenance]:
        return await self._scalars(
            select(Maintenance)
            .where(Maintenance.vehicle_id == vehicle_id)
            .order_by(Maintenance.created_at.desc(), Maintenance.id.desc())
        )

    async def list_upcoming(self, now: Optional[datetime] = None) -> list[Maintenance]:
        """Scheduled strictly after `now` and not completed; soonest first. Overdue rows are excluded."""
        now = now or utcnow()
        return await self._scalars(
            select(Maintenance)
            .where(Maintenance.scheduled_date > now, Maintenance.completed_date.is_(None))
            .order_by(Maintenance.scheduled_date.asc(), Maintenance.id.asc())
        )

    async def complete(
        self,
        maintenance_id: int,
        completed_date: datetime,
        notes: Optional[str] = None,
        actor_id: Optional[int] = None,
    ) -> Optional[Maintenance]:
        """
        Composite: mark the record complete, cascade to the owning vehicle
        (last_maintenance_date, status=available) and stage one
        `maintenance_completed` activity entry, committed together.
        """
        record = await self.get(maintenance_id, for_update=True)
        if not record:
            return None

        if completed_date < record.scheduled_date:
            log.warning(
                "Maintenance %s completed (%s) before its scheduled date (%s)",
                record.id, completed_date.isoformat(), record.scheduled_date.isoformat(),
            )

        record.completed_date = completed_date
        if notes is not None:
            record.notes = notes

        vehicle = await VehicleRepository(self.db).get(record.vehicle_id, for_update=True)
        if vehicle:
            vehicle.last_maintenance_date = completed_date
            vehicle.status = VehicleStatus.available
        else:
            log.warning("Maintenance %s references missing vehicle %s", record.id, record.vehicle_id)

        ActivityLogRepository(self.db).stage(
            user_id=actor_id,
            vehicle_id=record.vehicle_id,
            action="maintenance_completed",
            description=f"Maintenance completed for vehicle ID {record.vehicle_id}",
        )
        return await self._commit_refresh(record)


# ---------------------------------------------------------------------------
# Activity log (append-only)
# ---------------------------------------------------------------------------

class ActivityLogRepository(BaseRepository):
    def stage(self, **kwargs) -> ActivityLog:
        """Add an entry to the open unit of work without committing."""
        kwargs.pop("timestamp", None)
        entry = ActivityLog(**kwargs)
        self.db.add(entry)
        return entry

    async def create(self, **kwargs) -> ActivityLog:
        entry = self.stage(**kwargs)
        return await self._commit_refresh(entry)

    async def list_recent(self, limit: int = 10) -> list[ActivityLog]:
        return await self._scalars(
            select(ActivityLog)
            .order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
            .limit(limit)
        )

    async def count(self, action: Optional[str] = None) -> int:
        stmt = select(func.count(ActivityLog.id))
        if action:
            stmt = stmt.where(ActivityLog.action == action)
        result = await self._execute(stmt)
        return result.scalar() or 0


# ---------------------------------------------------------------------------
# Fuel report (append-only)
# ---------------------------------------------------------------------------

class FuelReportRepository(BaseRepository):
    async def create(self, **kwargs) -> FuelReport:
        kwargs.pop("report_date", None)
        return await self._add(FuelReport(**kwargs))

    async def list_for_vehicle(self, vehicle_id: int) -> list[FuelReport]:
        return await self._scalars(
            select(FuelReport)
            .where(FuelReport.vehicle_id == vehicle_id)
            .order_by(FuelReport.report_date.desc(), FuelReport.id.desc())
        )


# ---------------------------------------------------------------------------
# Geofence
# ---------------------------------------------------------------------------

class GeofenceRepository(BaseRepository):
    async def get(self, geofence_id: int) -> Optional[Geofence]:
        return await self._scalar_one_or_none(select(Geofence).where(Geofence.id == geofence_id))

    async def create(self, **kwargs) -> Geofence:
        return await self._add(Geofence(**kwargs))

    async def update(self, geofence: Geofence, data: dict[str, Any]) -> Geofence:
        return await self._patch(geofence, data)

    async def list(self) -> list[Geofence]:
        return await self._scalars(select(Geofence).order_by(Geofence.id))


# ---------------------------------------------------------------------------
# Alert
# ---------------------------------------------------------------------------

class AlertRepository(BaseRepository):
    async def get(self, alert_id: int) -> Optional[Alert]:
        return await self._scalar_one_or_none(select(Alert).where(Alert.id == alert_id))

    async def create(self, **kwargs) -> Alert:
        kwargs.pop("timestamp", None)
        return await self._add(Alert(**kwargs))

    async def mark_read(self, alert_id: int) -> Optional[Alert]:
        alert = await self.get(alert_id)
        if not alert:
            return None
        if alert.read:
            return alert
        alert.read = True
        return await self._commit_refresh(alert)

    async def list_unread(self) -> list[Alert]:
        return await self._scalars(
            select(Alert)
            .where(Alert.read.is_(False))
            .order_by(Alert.timestamp.desc(), Alert.id.desc())
        )
