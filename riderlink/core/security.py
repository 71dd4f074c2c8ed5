"""
Security utilities: password hashing and session token handling.

A session is a signed JWT carried in an HTTP-only cookie. Each token has a
`jti` (session id) so logout can revoke it before it expires.
"""
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from riderlink.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


@dataclass
class SessionClaims:
    user_id: int
    session_id: str
    expires_at: datetime


def create_session_token(subject: Any, expires_delta: timedelta | None = None) -> tuple[str, SessionClaims]:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    )
    session_id = uuid.uuid4().hex
    payload = {"sub": str(subject), "jti": session_id, "exp": expire}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return token, SessionClaims(user_id=int(subject), session_id=session_id, expires_at=expire)


def decode_session_token(token: str) -> SessionClaims | None:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return SessionClaims(
            user_id=int(payload["sub"]),
            session_id=payload["jti"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (JWTError, KeyError, TypeError, ValueError):
        return None


class SessionRevocationList:
    """
    Logged-out session ids, kept until their token would have expired anyway.
    Lives on app.state for the lifetime of the process.
    """

    def __init__(self):
        self._revoked: dict[str, float] = {}

    def revoke(self, claims: SessionClaims) -> None:
        self._prune()
        self._revoked[claims.session_id] = claims.expires_at.timestamp()

    def is_revoked(self, session_id: str) -> bool:
        self._prune()
        return session_id in self._revoked

    def __len__(self) -> int:
        self._prune()
        return len(self._revoked)

    def _prune(self) -> None:
        now = time.time()
        for sid in [sid for sid, exp in self._revoked.items() if exp <= now]:
            del self._revoked[sid]
