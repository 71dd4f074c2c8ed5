"""init

Revision ID: 0001_init
Revises:
Create Date: 2026-10-16

Initial RiderLink schema.
Tables: users, vehicles, gps_locations, maintenance, activity_logs,
        fuel_reports, geofences, alerts
Enums: user_role, vehicle_status, alert_type
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

USER_ROLES = ("rider", "fleet_supervisor", "admin", "super_admin")
VEHICLE_STATUSES = ("available", "in_use", "maintenance", "service_due")
ALERT_TYPES = ("geofence_exit", "geofence_enter", "maintenance_due", "speed_limit", "idle_time")


def upgrade() -> None:
    # Enums are created implicitly by SQLAlchemy during table creation.

    # ------------------------------------------------------------------
    # users
    # ------------------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", sa.Enum(*USER_ROLES, name="user_role"), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("profile_image", sa.String(500), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ------------------------------------------------------------------
    # vehicles
    # ------------------------------------------------------------------
    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("vehicle_id", sa.String(50), nullable=False, unique=True),
        sa.Column("make", sa.String(100), nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("license_plate", sa.String(30), nullable=False),
        sa.Column("vin", sa.String(50), nullable=False),
        sa.Column("status", sa.Enum(*VEHICLE_STATUSES, name="vehicle_status"), nullable=False),
        sa.Column("fuel_capacity", sa.Integer(), nullable=True),
        sa.Column("assigned_to", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("last_maintenance_date", sa.DateTime(), nullable=True),
        sa.Column("next_maintenance_date", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_vehicles_status", "vehicles", ["status"])

    # ------------------------------------------------------------------
    # gps_locations
    # ------------------------------------------------------------------
    op.create_table(
        "gps_locations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("speed", sa.Integer(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_gps_locations_vehicle_ts", "gps_locations", ["vehicle_id", "timestamp"])

    # ------------------------------------------------------------------
    # maintenance
    # ------------------------------------------------------------------
    op.create_table(
        "maintenance",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(), nullable=False),
        sa.Column("completed_date", sa.DateTime(), nullable=True),
        sa.Column("cost", sa.Integer(), nullable=True),
        sa.Column("technician", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_maintenance_vehicle_id", "maintenance", ["vehicle_id"])
    op.create_index("ix_maintenance_scheduled_date", "maintenance", ["scheduled_date"])

    # ------------------------------------------------------------------
    # activity_logs (append-only)
    # ------------------------------------------------------------------
    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=True),
        sa.Column("action", sa.String(80), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_activity_logs_timestamp", "activity_logs", ["timestamp"])

    # ------------------------------------------------------------------
    # fuel_reports (append-only)
    # ------------------------------------------------------------------
    op.create_table(
        "fuel_reports",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("cost", sa.Integer(), nullable=False),
        sa.Column("odometer", sa.Integer(), nullable=False),
        sa.Column("report_date", sa.DateTime(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_fuel_reports_vehicle_id", "fuel_reports", ["vehicle_id"])

    # ------------------------------------------------------------------
    # geofences
    # ------------------------------------------------------------------
    op.create_table(
        "geofences",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("coordinates", sa.Text(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    # ------------------------------------------------------------------
    # alerts
    # ------------------------------------------------------------------
    op.create_table(
        "alerts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=True),
        sa.Column("type", sa.Enum(*ALERT_TYPES, name="alert_type"), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_alerts_read", "alerts", ["read"])


def downgrade() -> None:
    op.drop_table("alerts")
    op.drop_table("geofences")
    op.drop_table("fuel_reports")
    op.drop_table("activity_logs")
    op.drop_table("maintenance")
    op.drop_table("gps_locations")
    op.drop_table("vehicles")
    op.drop_table("users")

    # Drop enums (no-op on SQLite)
    if op.get_bind().dialect.name == "postgresql":
        for enum_name in ("alert_type", "vehicle_status", "user_role"):
            op.execute(f"DROP TYPE IF EXISTS {enum_name}")
