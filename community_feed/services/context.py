"""The handle every feed operation receives, plus shared guards."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError

from ..cache import QueryCache
from ..config import Settings, get_settings
from ..errors import AuthError, FetchError, ForbiddenError, NotFoundError
from ..schemas.auth import Identity
from ..store.base import BlobStore, RemoteStore, SessionProvider

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class FeedContext:
    """Store, blob storage, session accessor and cache for one client."""

    store: RemoteStore
    blobs: BlobStore
    sessions: SessionProvider
    cache: QueryCache = field(default_factory=QueryCache)
    settings: Settings = field(default_factory=get_settings)


async def require_identity(ctx: FeedContext, message: str = "Please sign in") -> Identity:
    identity = await ctx.sessions.get_current_identity()
    if identity is None:
        raise AuthError(message)
    return identity


def validate_row(model: type[ModelT], row: dict[str, Any], *, table: str) -> ModelT:
    try:
        return model.model_validate(row)
    except ValidationError as exc:
        raise FetchError(f"Malformed row returned from {table}") from exc


def validate_rows(model: type[ModelT], rows: Iterable[dict[str, Any]], *, table: str) -> list[ModelT]:
    return [validate_row(model, row, table=table) for row in rows]


def owns(ctx: FeedContext, owner_id: UUID, identity: Identity, *, what: str) -> bool:
    """Return True when ``identity`` owns the row.

    A non-owner either gets :class:`ForbiddenError` or, with silent ownership
    failures enabled, ``False`` so the caller can report zero rows affected.
    """

    if owner_id == identity.id:
        return True
    if ctx.settings.silent_ownership_failures:
        return False
    raise ForbiddenError(f"You can only change your own {what}")


def missing(ctx: FeedContext, *, what: str) -> int:
    """Zero rows affected in silent mode, otherwise :class:`NotFoundError`."""

    if ctx.settings.silent_ownership_failures:
        return 0
    raise NotFoundError(f"{what.capitalize()} not found")


__all__ = [
    "FeedContext",
    "require_identity",
    "validate_row",
    "validate_rows",
    "owns",
    "missing",
]
