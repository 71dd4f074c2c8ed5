"""
riderlink/core/roles.py
────────────────────────
Role-based access control dependencies.

Roles (stored on User.role):
  rider            → own vehicle, GPS pings, fuel reports; read access to fleet data
  fleet_supervisor → manage vehicles, maintenance, geofences, alerts
  admin            → everything a supervisor can do, plus user management
  super_admin      → same as admin

Each operation declares an allow-list; a caller whose role is not in it gets
403. Reads generally need authentication only.

Usage:
    from riderlink.core.roles import require_admin, require_manager

    @router.post("/vehicles", dependencies=[Depends(require_manager)])
    async def create_vehicle(...):
        ...
"""

from __future__ import annotations

from fastapi import Depends

from riderlink.core.deps import get_current_user
from riderlink.core.exceptions import ForbiddenError
from riderlink.models.models import User, UserRole

ADMIN_ROLES = frozenset({UserRole.admin, UserRole.super_admin})
MANAGER_ROLES = frozenset({UserRole.fleet_supervisor, UserRole.admin, UserRole.super_admin})


def require_roles(allowed: frozenset[UserRole] | set[UserRole]):
    """
    Returns a FastAPI dependency that enforces an allow-list of roles.

    Example:
        dependencies=[Depends(require_roles({UserRole.admin}))]
    """
    allowed = frozenset(allowed)

    async def _check(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError(
                details={
                    "required_roles": sorted(r.value for r in allowed),
                    "your_role": current_user.role.value,
                },
            )
        return current_user

    return _check


# Pre-built dependency instances
require_admin   = require_roles(ADMIN_ROLES)
require_manager = require_roles(MANAGER_ROLES)
