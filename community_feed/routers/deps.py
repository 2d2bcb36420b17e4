"""FastAPI dependencies that assemble a feed context per request."""
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import get_settings
from ..services.context import FeedContext
from ..store.auth import TokenSessionProvider
from ..store.base import BlobStore, RemoteStore
from ..store.blobs import SpacesBlobStore
from ..store.sql import SqlRemoteStore

_security = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_remote_store() -> RemoteStore:
    return SqlRemoteStore()


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    # Storage configuration is only validated on first upload.
    return SpacesBlobStore()


def get_feed_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    store: RemoteStore = Depends(get_remote_store),
    blobs: BlobStore = Depends(get_blob_store),
) -> FeedContext:
    """Build a context for the bearer of the request; missing tokens yield an anonymous caller."""

    token = None
    if credentials is not None and credentials.scheme.lower() == "bearer":
        token = credentials.credentials
    return FeedContext(
        store=store,
        blobs=blobs,
        sessions=TokenSessionProvider(token),
        settings=get_settings(),
    )


__all__ = ["get_feed_context", "get_remote_store", "get_blob_store"]
