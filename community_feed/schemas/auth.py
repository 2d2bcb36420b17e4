"""Schemas describing the authenticated caller."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class Identity(BaseModel):
    """The account reference behind a valid access token."""

    id: UUID
    email: str | None = None

    @property
    def email_local_part(self) -> str | None:
        if not self.email or "@" not in self.email:
            return None
        local = self.email.split("@", 1)[0].strip()
        return local or None


class AuthSession(BaseModel):
    access_token: str
    identity: Identity
    expires_at: datetime | None = None


__all__ = ["Identity", "AuthSession"]
