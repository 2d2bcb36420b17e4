"""Interfaces of the remote data store the feed layer is built on.

The hosted backend is reduced to three collaborators: table-scoped CRUD, blob
storage with public URLs, and a session accessor. Concrete implementations live
beside this module; tests and alternative backends only need to satisfy these
protocols.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence

from ..schemas.auth import AuthSession, Identity

POSTS = "posts"
COMMENTS = "comments"
LIKES = "likes"
PROFILES = "profiles"
DEVOTIONALS = "devotionals"

# Embeds understood by ``RemoteStore.query`` on the ``posts`` table.
EMBED_AUTHOR = "author"
EMBED_COMMENT_COUNT = "comment_count"
EMBED_LIKE_COUNT = "like_count"

Row = dict[str, Any]


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True


class RemoteStore(Protocol):
    async def query(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order: Order | None = None,
        embed: Sequence[str] = (),
        limit: int | None = None,
    ) -> list[Row]:
        ...

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        ...

    async def update(self, table: str, patch: Mapping[str, Any], *, filters: Mapping[str, Any]) -> int:
        ...

    async def delete(self, table: str, *, filters: Mapping[str, Any]) -> int:
        ...


class BlobStore(Protocol):
    async def upload_blob(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        ...

    def get_public_url(self, bucket: str, key: str) -> str:
        ...

    async def delete_blob(self, bucket: str, key: str) -> None:
        ...


class SessionProvider(Protocol):
    async def get_session(self) -> AuthSession | None:
        ...

    async def get_current_identity(self) -> Identity | None:
        ...


__all__ = [
    "POSTS",
    "COMMENTS",
    "LIKES",
    "PROFILES",
    "DEVOTIONALS",
    "EMBED_AUTHOR",
    "EMBED_COMMENT_COUNT",
    "EMBED_LIKE_COUNT",
    "Row",
    "Order",
    "RemoteStore",
    "BlobStore",
    "SessionProvider",
]
