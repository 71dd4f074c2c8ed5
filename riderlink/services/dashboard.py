"""
Dashboard summary: four independent list reads reduced to counts.
No caching; every call rescans the collections.
"""
from collections import Counter

from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.models.models import UserRole, VehicleStatus
from riderlink.repositories.repositories import (
    AlertRepository, MaintenanceRepository, UserRepository, VehicleRepository,
)


async def build_summary(db: AsyncSession) -> dict:
    vehicles = await VehicleRepository(db).list()
    users = await UserRepository(db).list()
    alerts = await AlertRepository(db).list_unread()
    upcoming = await MaintenanceRepository(db).list_upcoming()

    by_status = Counter(v.status for v in vehicles)
    return {
        "total_vehicles": len(vehicles),
        "active_riders": sum(1 for u in users if u.role == UserRole.rider and u.active),
        "maintenance_due": len(upcoming),
        "alerts": len(alerts),
        "vehicle_status_counts": {
            "available": by_status[VehicleStatus.available],
            "in_use": by_status[VehicleStatus.in_use],
            "maintenance": by_status[VehicleStatus.maintenance],
            "service_due": by_status[VehicleStatus.service_due],
        },
    }
