"""
Auth endpoints: login, logout, me.
"""
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from riderlink.core.config import settings
from riderlink.core.database import get_db
from riderlink.core.deps import get_current_user, get_revocation_list, get_session_claims
from riderlink.core.exceptions import UnauthenticatedError
from riderlink.core.security import SessionClaims, SessionRevocationList, create_session_token, verify_password
from riderlink.models.models import User
from riderlink.repositories.repositories import UserRepository
from riderlink.schemas.schemas import LoginRequest, MessageOut, UserOut

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=UserOut)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    repo = UserRepository(db)
    user = await repo.get_by_email(payload.email)

    if not user or not verify_password(payload.password, user.hashed_password):
        log.warning("Failed login for %s", payload.email)
        raise UnauthenticatedError("Invalid email or password")
    if not user.active:
        log.warning("Login refused for deactivated user %s", user.id)
        raise UnauthenticatedError("Account is deactivated")

    token, claims = create_session_token(subject=user.id)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    log.info("User %s logged in (session %s)", user.id, claims.session_id)
    return user


@router.post("/logout", response_model=MessageOut)
async def logout(
    response: Response,
    claims: SessionClaims = Depends(get_session_claims),
    revoked: SessionRevocationList = Depends(get_revocation_list),
):
    revoked.revoke(claims)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, httponly=True, samesite="lax")
    log.info("User %s logged out (session %s)", claims.user_id, claims.session_id)
    return MessageOut(message="Logged out successfully")


@router.get("/me", response_model=UserOut)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
