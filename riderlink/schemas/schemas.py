"""
Pydantic schemas for all request and response models.

Wire format is camelCase (vehicleId, scheduledDate, ...); snake_case is
accepted on input too. Incoming datetimes are normalised to naive UTC to match
what the store keeps.
"""
import json
from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from riderlink.models.models import AlertType, UserRole, VehicleStatus


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_to_naive_utc)]


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("may not be null")
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class MessageOut(CamelModel):
    message: str


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------

class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: UserRole = UserRole.rider
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    active: bool = True


class UserUpdate(CamelModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8)
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("email", "password", "first_name", "last_name", "role", "active", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return _reject_null(value)


class UserOut(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    phone: Optional[str]
    profile_image: Optional[str]
    active: bool
    created_at: datetime


class UserSummary(CamelModel):
    id: int
    first_name: str
    last_name: str


# ---------------------------------------------------------------------------
# Vehicle
# ---------------------------------------------------------------------------

class VehicleCreate(CamelModel):
    vehicle_id: str = Field(min_length=1, max_length=50)
    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: int = Field(ge=1900, le=2100)
    license_plate: str = Field(min_length=1, max_length=30)
    vin: str = Field(min_length=1, max_length=50)
    status: VehicleStatus = VehicleStatus.available
    fuel_capacity: Optional[int] = Field(default=None, ge=0)
    assigned_to: Optional[int] = None
    last_maintenance_date: Optional[UtcDatetime] = None
    next_maintenance_date: Optional[UtcDatetime] = None


class VehicleUpdate(CamelModel):
    vehicle_id: Optional[str] = Field(default=None, min_length=1, max_length=50)
    make: Optional[str] = Field(default=None, min_length=1, max_length=100)
    model: Optional[str] = Field(default=None, min_length=1, max_length=100)
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    license_plate: Optional[str] = Field(default=None, min_length=1, max_length=30)
    vin: Optional[str] = Field(default=None, min_length=1, max_length=50)
    status: Optional[VehicleStatus] = None
    fuel_capacity: Optional[int] = Field(default=None, ge=0)
    assigned_to: Optional[int] = None
    last_maintenance_date: Optional[UtcDatetime] = None
    next_maintenance_date: Optional[UtcDatetime] = None

    @field_validator("vehicle_id", "make", "model", "year", "license_plate", "vin", "status", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return _reject_null(value)


class VehicleAssign(CamelModel):
    user_id: int


class VehicleOut(CamelModel):
    id: int
    vehicle_id: str
    make: str
    model: str
    year: int
    license_plate: str
    vin: str
    status: VehicleStatus
    fuel_capacity: Optional[int]
    assigned_to: Optional[int]
    last_maintenance_date: Optional[datetime]
    next_maintenance_date: Optional[datetime]
    created_at: datetime


class VehicleSummary(CamelModel):
    id: int
    vehicle_id: str
    make: str
    model: str


# ---------------------------------------------------------------------------
# GPS location
# ---------------------------------------------------------------------------

class GpsLocationCreate(CamelModel):
    vehicle_id: int
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    speed: Optional[int] = Field(default=None, ge=0)


class GpsLocationOut(CamelModel):
    id: int
    vehicle_id: int
    latitude: float
    longitude: float
    speed: Optional[int]
    timestamp: datetime


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------

class MaintenanceCreate(CamelModel):
    vehicle_id: int
    type: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    scheduled_date: UtcDatetime
    completed_date: Optional[UtcDatetime] = None
    cost: Optional[int] = Field(default=None, ge=0)
    technician: Optional[str] = None
    notes: Optional[str] = None


class MaintenanceComplete(CamelModel):
    completed_date: Optional[UtcDatetime] = None  # defaults to now
    notes: Optional[str] = None


class MaintenanceOut(CamelModel):
    id: int
    vehicle_id: int
    type: str
    description: str
    scheduled_date: datetime
    completed_date: Optional[datetime]
    cost: Optional[int]
    technician: Optional[str]
    notes: Optional[str]
    created_by: Optional[int]
    created_at: datetime


# ---------------------------------------------------------------------------
# Activity log
# ---------------------------------------------------------------------------

class ActivityLogOut(CamelModel):
    id: int
    user_id: Optional[int]
    vehicle_id: Optional[int]
    action: str
    description: str
    timestamp: datetime
    user: Optional[UserSummary] = None
    vehicle: Optional[VehicleSummary] = None


# ---------------------------------------------------------------------------
# Fuel report
# ---------------------------------------------------------------------------

class FuelReportCreate(CamelModel):
    vehicle_id: int
    amount: int = Field(gt=0)      # millilitres
    cost: int = Field(ge=0)        # cents
    odometer: int = Field(ge=0)    # km
    notes: Optional[str] = None


class FuelReportOut(CamelModel):
    id: int
    vehicle_id: int
    user_id: int
    amount: int
    cost: int
    odometer: int
    report_date: datetime
    notes: Optional[str]


# ---------------------------------------------------------------------------
# Geofence
# ---------------------------------------------------------------------------

def _serialize_polygon(value: Any) -> str:
    """Accept a JSON string or a list of [lat, lng] pairs / {lat, lng} objects; store as JSON text."""
    points = value
    if isinstance(value, str):
        try:
            points = json.loads(value)
        except ValueError:
            raise ValueError("coordinates must be a JSON array of [lat, lng] pairs")
    if not isinstance(points, list) or len(points) < 3:
        raise ValueError("a polygon needs at least 3 points")

    normalised = []
    for point in points:
        if isinstance(point, dict):
            point = [point.get("lat"), point.get("lng")]
        if not isinstance(point, (list, tuple)) or len(point) != 2:
            raise ValueError("each point must be a [lat, lng] pair")
        lat, lng = point
        if any(isinstance(c, bool) or not isinstance(c, (int, float)) for c in (lat, lng)):
            raise ValueError("each point must be a [lat, lng] pair")
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            raise ValueError("point out of range")
        normalised.append([float(lat), float(lng)])
    return json.dumps(normalised)


class GeofenceCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    coordinates: str
    active: bool = True

    @field_validator("coordinates", mode="before")
    @classmethod
    def polygon(cls, value: Any) -> str:
        return _serialize_polygon(value)


class GeofenceUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    coordinates: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("name", "active", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return _reject_null(value)

    @field_validator("coordinates", mode="before")
    @classmethod
    def polygon(cls, value: Any) -> str:
        return _serialize_polygon(_reject_null(value))


class GeofenceOut(CamelModel):
    id: int
    name: str
    description: Optional[str]
    coordinates: str
    active: bool
    created_by: Optional[int]
    created_at: datetime


# ---------------------------------------------------------------------------
# Alert
# ---------------------------------------------------------------------------

class AlertCreate(CamelModel):
    vehicle_id: Optional[int] = None
    type: AlertType
    message: str = Field(min_length=1)


class AlertOut(CamelModel):
    id: int
    vehicle_id: Optional[int]
    type: AlertType
    message: str
    read: bool
    timestamp: datetime


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class VehicleStatusCounts(CamelModel):
    available: int
    in_use: int
    maintenance: int
    service_due: int


class DashboardSummary(CamelModel):
    total_vehicles: int
    active_riders: int
    maintenance_due: int
    alerts: int
    vehicle_status_counts: VehicleStatusCounts
