"""Explicit in-memory query cache with prefix invalidation.

Keys are tuples such as ``("comments", post_id)``. Invalidating a key drops that
entry and every entry whose key starts with it, so ``invalidate(("posts",))``
also clears per-author feeds stored under ``("posts", "author", user_id)``.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Hashable, TypeVar
from uuid import UUID

logger = logging.getLogger(__name__)

CacheKey = tuple[Hashable, ...]
T = TypeVar("T")

_MISSING = object()


def posts_key() -> CacheKey:
    return ("posts",)


def author_posts_key(user_id: UUID) -> CacheKey:
    return ("posts", "author", user_id)


def comments_key(post_id: UUID) -> CacheKey:
    return ("comments", post_id)


def post_likes_key(post_id: UUID) -> CacheKey:
    return ("likes", post_id)


def like_key(post_id: UUID, user_id: UUID) -> CacheKey:
    return ("likes", post_id, user_id)


def profile_key(user_id: UUID) -> CacheKey:
    return ("profiles", "id", user_id)


def username_key(username: str) -> CacheKey:
    return ("profiles", "username", username)


def profiles_key() -> CacheKey:
    return ("profiles",)


def devotionals_key() -> CacheKey:
    return ("devotionals",)


class QueryCache:
    """Keyed cache of query results, owned by whoever builds the feed context."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, Any] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: CacheKey, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def set(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = value

    def invalidate(self, key: CacheKey) -> int:
        """Drop ``key`` and every entry nested under it; return how many were removed."""

        size = len(key)
        stale = [existing for existing in self._entries if existing[:size] == key]
        for existing in stale:
            del self._entries[existing]
        if stale:
            logger.debug("Invalidated %d cache entr%s under %r", len(stale), "y" if len(stale) == 1 else "ies", key)
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    async def get_or_load(self, key: CacheKey, loader: Callable[[], Awaitable[T]], *, refresh: bool = False) -> T:
        """Return the cached value for ``key`` or await ``loader`` once and store its result.

        Loader failures propagate and leave the cache untouched.
        """

        if not refresh:
            cached = self._entries.get(key, _MISSING)
            if cached is not _MISSING:
                return cached
        value = await loader()
        self._entries[key] = value
        return value


__all__ = [
    "CacheKey",
    "QueryCache",
    "posts_key",
    "author_posts_key",
    "comments_key",
    "post_likes_key",
    "like_key",
    "profile_key",
    "username_key",
    "profiles_key",
    "devotionals_key",
]
