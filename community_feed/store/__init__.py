"""Remote data store interfaces and implementations."""
from .auth import TokenSessionProvider, create_access_token, decode_access_token
from .base import (
    COMMENTS,
    DEVOTIONALS,
    EMBED_AUTHOR,
    EMBED_COMMENT_COUNT,
    EMBED_LIKE_COUNT,
    LIKES,
    POSTS,
    PROFILES,
    BlobStore,
    Order,
    RemoteStore,
    Row,
    SessionProvider,
)
from .blobs import SpacesBlobStore, build_object_key, key_from_public_url
from .sql import SqlRemoteStore

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
    "SqlRemoteStore",
    "SpacesBlobStore",
    "TokenSessionProvider",
    "build_object_key",
    "key_from_public_url",
    "create_access_token",
    "decode_access_token",
]
