"""Per-user like state and toggling."""
from __future__ import annotations

import logging
from uuid import UUID

from ..cache import like_key, posts_key
from ..store.base import LIKES
from .context import FeedContext, require_identity

logger = logging.getLogger(__name__)


async def is_liked_by_me(ctx: FeedContext, post_id: UUID, *, refresh: bool = False) -> bool:
    """Return whether the caller has a like row for ``post_id``; anonymous callers never do."""

    identity = await ctx.sessions.get_current_identity()
    if identity is None:
        return False

    async def _load() -> bool:
        rows = await ctx.store.query(LIKES, filters={"post_id": post_id, "user_id": identity.id}, limit=1)
        return bool(rows)

    return await ctx.cache.get_or_load(like_key(post_id, identity.id), _load, refresh=refresh)


async def toggle_like(ctx: FeedContext, post_id: UUID, liked: bool) -> bool:
    """Invert the caller's like on ``post_id`` given its current state; return the new state.

    There is no lock between reading ``liked`` and writing. Two racing toggles
    may both insert (the second is rejected by the unique constraint as a
    ``WriteError``) or both delete (the second removes nothing).
    """

    identity = await require_identity(ctx, "Please sign in to like posts")

    filters = {"post_id": post_id, "user_id": identity.id}
    if liked:
        await ctx.store.delete(LIKES, filters=filters)
    else:
        await ctx.store.insert(LIKES, filters)

    ctx.cache.invalidate(like_key(post_id, identity.id))
    ctx.cache.invalidate(posts_key())
    logger.debug("User %s %s post %s", identity.id, "unliked" if liked else "liked", post_id)
    return not liked


__all__ = ["is_liked_by_me", "toggle_like"]
