"""
API router: aggregates all endpoint sub-routers.
"""
from fastapi import APIRouter

from riderlink.api.endpoints import (
    activity_logs, alerts, auth, dashboard, fuel_reports, geofences, gps_locations, maintenance, users, vehicles,
)

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(vehicles.router)
api_router.include_router(gps_locations.router)
api_router.include_router(maintenance.router)
api_router.include_router(activity_logs.router)
api_router.include_router(fuel_reports.router)
api_router.include_router(geofences.router)
api_router.include_router(alerts.router)
api_router.include_router(dashboard.router)
