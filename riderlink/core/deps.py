"""
FastAPI dependency functions for authentication and shared lookups.

The session token travels in an HTTP-only cookie; see core.security.
"""
from fastapi import Depends, Request
from fastapi.security import APIKeyCookie
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.config import settings
from riderlink.core.database import get_db
from riderlink.core.exceptions import NotFoundError, UnauthenticatedError
from riderlink.core.security import SessionClaims, SessionRevocationList, decode_session_token
from riderlink.models.models import User, Vehicle
from riderlink.repositories.repositories import UserRepository, VehicleRepository

session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)


def get_revocation_list(request: Request) -> SessionRevocationList:
    return request.app.state.revoked_sessions


async def get_session_claims(
    token: str | None = Depends(session_cookie),
    revoked: SessionRevocationList = Depends(get_revocation_list),
) -> SessionClaims:
    if not token:
        raise UnauthenticatedError()
    claims = decode_session_token(token)
    if claims is None or revoked.is_revoked(claims.session_id):
        raise UnauthenticatedError("Session expired or invalid")
    return claims


async def get_current_user(
    claims: SessionClaims = Depends(get_session_claims),
    db: AsyncSession = Depends(get_db),
) -> User:
    user = await UserRepository(db).get(claims.user_id)
    if not user or not user.active:
        raise UnauthenticatedError("Session expired or invalid")
    return user


async def ensure_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    """Resolve a vehicle reference or raise NotFoundError (404)."""
    vehicle = await VehicleRepository(db).get(vehicle_id)
    if not vehicle:
        raise NotFoundError("Vehicle", vehicle_id)
    return vehicle


async def get_path_vehicle(vehicle_id: int, db: AsyncSession = Depends(get_db)) -> Vehicle:
    return await ensure_vehicle(db, vehicle_id)
