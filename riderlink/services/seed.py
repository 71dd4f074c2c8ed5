"""
riderlink/services/seed.py
───────────────────────────
Demo fleet loaded into an empty store at startup (SEED_DEMO_DATA).

Accounts:
  admin@riderlink.com / password123  (admin)
  rider@riderlink.com / password123  (rider, holds MBK-1023)
"""
import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.security import hash_password
from riderlink.models.models import AlertType, UserRole, VehicleStatus
from riderlink.repositories.repositories import (
    ActivityLogRepository, AlertRepository, GpsLocationRepository, UserRepository, VehicleRepository,
)

log = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"


async def seed_demo_data(db: AsyncSession) -> bool:
    """Returns False without touching anything if users already exist."""
    users = UserRepository(db)
    if await users.count() > 0:
        log.info("Store already populated, skipping demo seed")
        return False

    await users.create(
        email="admin@riderlink.com",
        hashed_password=hash_password(DEMO_PASSWORD),
        first_name="Admin",
        last_name="User",
        role=UserRole.admin,
        phone="123-456-7890",
        profile_image="",
    )
    rider = await users.create(
        email="rider@riderlink.com",
        hashed_password=hash_password(DEMO_PASSWORD),
        first_name="John",
        last_name="Smith",
        role=UserRole.rider,
        phone="123-456-7891",
        profile_image="",
    )

    vehicles = VehicleRepository(db)
    yamaha = await vehicles.create(
        vehicle_id="MBK-1023", make="Yamaha", model="YBR 125", year=2022,
        license_plate="ABC123", vin="1HGCM82633A123456",
        status=VehicleStatus.in_use, fuel_capacity=10, assigned_to=rider.id,
        last_maintenance_date=datetime(2023, 1, 12),
        next_maintenance_date=datetime(2023, 4, 12),
    )
    honda = await vehicles.create(
        vehicle_id="MBK-1065", make="Honda", model="CBF 150", year=2021,
        license_plate="DEF456", vin="1HGCM82633A654321",
        status=VehicleStatus.available, fuel_capacity=12,
        last_maintenance_date=datetime(2023, 2, 3),
        next_maintenance_date=datetime(2023, 5, 3),
    )
    suzuki = await vehicles.create(
        vehicle_id="MBK-1089", make="Suzuki", model="GS 150", year=2020,
        license_plate="GHI789", vin="1HGCM82633A789012",
        status=VehicleStatus.maintenance, fuel_capacity=11,
        last_maintenance_date=datetime(2022, 12, 27),
        next_maintenance_date=datetime(2023, 3, 27),
    )

    gps = GpsLocationRepository(db)
    await gps.create(vehicle_id=yamaha.id, latitude=40.7128, longitude=-74.0060, speed=30)
    await gps.create(vehicle_id=honda.id, latitude=40.7129, longitude=-74.0061, speed=0)
    await gps.create(vehicle_id=suzuki.id, latitude=40.7130, longitude=-74.0062, speed=0)

    activity = ActivityLogRepository(db)
    await activity.create(
        user_id=rider.id, vehicle_id=yamaha.id,
        action="vehicle_checkout", description=f"Vehicle {yamaha.vehicle_id} checked out",
    )
    await activity.create(
        vehicle_id=suzuki.id, action="maintenance_complete", description="Maintenance completed",
    )
    await activity.create(user_id=rider.id, action="fuel_reported", description="Fuel reported")
    await activity.create(
        vehicle_id=suzuki.id, action="geofence_exit", description="Alert: Geofence exit",
    )

    alerts = AlertRepository(db)
    await alerts.create(vehicle_id=yamaha.id, type=AlertType.maintenance_due, message="Maintenance due in 5 days")
    await alerts.create(vehicle_id=suzuki.id, type=AlertType.geofence_exit, message="Vehicle exited designated area")

    log.info("Demo fleet seeded: 2 users, 3 vehicles, 3 GPS points, 4 activity entries, 2 alerts")
    return True
