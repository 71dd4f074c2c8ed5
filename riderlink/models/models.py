"""
SQLAlchemy ORM models for the RiderLink fleet store.

Integer identities are assigned by the store on insert. All timestamps are
naive UTC and set server-side; clients never supply them.
"""

import enum
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean, DateTime, Enum, Float, ForeignKey, Index, Integer, String, Text
)
from sqlalchemy.orm import Mapped, mapped_column

from riderlink.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class UserRole(str, enum.Enum):
    rider = "rider"
    fleet_supervisor = "fleet_supervisor"
    admin = "admin"
    super_admin = "super_admin"


class VehicleStatus(str, enum.Enum):
    available = "available"
    in_use = "in_use"
    maintenance = "maintenance"
    service_due = "service_due"


class AlertType(str, enum.Enum):
    geofence_exit = "geofence_exit"
    geofence_enter = "geofence_enter"
    maintenance_due = "maintenance_due"
    speed_limit = "speed_limit"
    idle_time = "idle_time"


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole, name="user_role"), default=UserRole.rider, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    profile_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


# ---------------------------------------------------------------------------
# Vehicle
# ---------------------------------------------------------------------------

class Vehicle(Base):
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vehicle_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)  # business code, e.g. MBK-1023
    make: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    license_plate: Mapped[str] = mapped_column(String(30), nullable=False)
    vin: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[VehicleStatus] = mapped_column(
        Enum(VehicleStatus, name="vehicle_status"), default=VehicleStatus.available, nullable=False
    )
    fuel_capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # litres
    assigned_to: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    last_maintenance_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    next_maintenance_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (Index("ix_vehicles_status", "status"),)


# ---------------------------------------------------------------------------
# GPS location (append-only)
# ---------------------------------------------------------------------------

class GpsLocation(Base):
    __tablename__ = "gps_locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id"), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    speed: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # km/h
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (Index("ix_gps_locations_vehicle_ts", "vehicle_id", "timestamp"),)


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------

class Maintenance(Base):
    __tablename__ = "maintenance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id"), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)  # e.g. "Oil Change"
    description: Mapped[str] = mapped_column(Text, nullable=False)
    scheduled_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    completed_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    cost: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # cents
    technician: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_maintenance_vehicle_id", "vehicle_id"),
        Index("ix_maintenance_scheduled_date", "scheduled_date"),
    )


# ---------------------------------------------------------------------------
# Activity log (append-only audit trail)
# ---------------------------------------------------------------------------

class ActivityLog(Base):
    """Never UPDATE or DELETE rows here."""
    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    vehicle_id: Mapped[Optional[int]] = mapped_column(ForeignKey("vehicles.id"), nullable=True)
    action: Mapped[str] = mapped_column(String(80), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (Index("ix_activity_logs_timestamp", "timestamp"),)


# ---------------------------------------------------------------------------
# Fuel report (append-only)
# ---------------------------------------------------------------------------

class FuelReport(Base):
    __tablename__ = "fuel_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)    # millilitres
    cost: Mapped[int] = mapped_column(Integer, nullable=False)      # cents
    odometer: Mapped[int] = mapped_column(Integer, nullable=False)  # km
    report_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_fuel_reports_vehicle_id", "vehicle_id"),)


# ---------------------------------------------------------------------------
# Geofence
# ---------------------------------------------------------------------------

class Geofence(Base):
    __tablename__ = "geofences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    coordinates: Mapped[str] = mapped_column(Text, nullable=False)  # JSON list of [lat, lng]
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


# ---------------------------------------------------------------------------
# Alert
# ---------------------------------------------------------------------------

class Alert(Base):
    """`read` only ever moves false -> true."""
    __tablename__ = "alerts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vehicle_id: Mapped[Optional[int]] = mapped_column(ForeignKey("vehicles.id"), nullable=True)
    type: Mapped[AlertType] = mapped_column(Enum(AlertType, name="alert_type"), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (Index("ix_alerts_read", "read"),)
