"""Session accessor backed by the hosted auth service's access tokens."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional
from uuid import UUID

from jose import JWTError, jwt

from ..config import get_settings
from ..errors import AuthError, ConfigurationError
from ..schemas.auth import AuthSession, Identity
from ..security.secrets import MissingSecretError, require_secret

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_MINUTES = 60


@lru_cache(maxsize=1)
def _get_jwt_secret() -> str:
    try:
        return require_secret("JWT_SECRET_KEY")
    except MissingSecretError as exc:
        raise ConfigurationError(str(exc)) from exc


def create_access_token(
    subject: UUID,
    *,
    email: str | None = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """Create a signed token in the shape the auth service issues (``sub`` plus ``email``)."""

    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(subject),
        "exp": now + timedelta(minutes=expires_minutes or DEFAULT_TOKEN_MINUTES),
        "iat": now,
    }
    if email:
        payload["email"] = email
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience
    return jwt.encode(payload, _get_jwt_secret(), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> AuthSession:
    """Decode and validate a token, returning the session it represents."""

    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            _get_jwt_secret(),
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None},
        )
    except JWTError as exc:
        raise AuthError("Invalid token") from exc

    subject = payload.get("sub")
    if not subject:
        raise AuthError("Invalid token payload")
    try:
        identity = Identity(id=UUID(str(subject)), email=payload.get("email"))
    except ValueError as exc:
        raise AuthError("Invalid token payload") from exc

    expires_at = None
    if payload.get("exp") is not None:
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
    return AuthSession(access_token=token, identity=identity, expires_at=expires_at)


class TokenSessionProvider:
    """Resolves the caller from a bearer token; no token or a bad token means no session."""

    def __init__(self, access_token: str | None = None) -> None:
        self._access_token = access_token
        self._session: AuthSession | None = None

    async def get_session(self) -> AuthSession | None:
        if not self._access_token:
            return None
        if self._session is None:
            try:
                self._session = decode_access_token(self._access_token)
            except AuthError as exc:
                logger.info("Rejected access token: %s", exc)
                return None
        return self._session

    async def get_current_identity(self) -> Identity | None:
        session = await self.get_session()
        return session.identity if session is not None else None


__all__ = [
    "TokenSessionProvider",
    "create_access_token",
    "decode_access_token",
]
