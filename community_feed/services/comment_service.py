"""Comment listing and owner-guarded create/update/delete."""
from __future__ import annotations

from uuid import UUID

from ..cache import comments_key, posts_key
from ..errors import ValidationFailedError
from ..models.base import utcnow
from ..schemas.posts import CommentRecord
from ..store.base import COMMENTS, Order
from .context import FeedContext, missing, owns, require_identity, validate_row, validate_rows

OLDEST_FIRST = Order("created_at", ascending=True)


def _clean_content(content: str | None) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationFailedError("Comment cannot be empty")
    return text


async def list_comments(ctx: FeedContext, post_id: UUID, *, refresh: bool = False) -> list[CommentRecord]:
    async def _load() -> list[CommentRecord]:
        rows = await ctx.store.query(COMMENTS, filters={"post_id": post_id}, order=OLDEST_FIRST)
        return validate_rows(CommentRecord, rows, table=COMMENTS)

    comments = await ctx.cache.get_or_load(comments_key(post_id), _load, refresh=refresh)
    return list(comments)


async def create_comment(ctx: FeedContext, post_id: UUID, content: str) -> CommentRecord:
    identity = await require_identity(ctx, "Please sign in to comment")
    text = _clean_content(content)

    now = utcnow()
    inserted = await ctx.store.insert(
        COMMENTS,
        {
            "post_id": post_id,
            "user_id": identity.id,
            "content": text,
            "created_at": now,
            "updated_at": now,
        },
    )

    ctx.cache.invalidate(comments_key(post_id))
    ctx.cache.invalidate(posts_key())
    return validate_row(CommentRecord, inserted, table=COMMENTS)


async def _owned_comment(ctx: FeedContext, comment_id: UUID, *, action: str) -> tuple[CommentRecord | None, UUID]:
    identity = await require_identity(ctx, f"Please sign in to {action} comments")
    rows = await ctx.store.query(COMMENTS, filters={"id": comment_id}, limit=1)
    if not rows:
        missing(ctx, what="comment")
        return None, identity.id
    comment = validate_row(CommentRecord, rows[0], table=COMMENTS)
    if not owns(ctx, comment.user_id, identity, what="comments"):
        return None, identity.id
    return comment, identity.id


async def update_comment(ctx: FeedContext, comment_id: UUID, content: str) -> int:
    """Edit one of the caller's comments; return the number of rows changed."""

    comment, user_id = await _owned_comment(ctx, comment_id, action="edit")
    if comment is None:
        return 0
    text = _clean_content(content)

    updated = await ctx.store.update(
        COMMENTS,
        {"content": text, "updated_at": utcnow()},
        filters={"id": comment_id, "user_id": user_id},
    )
    ctx.cache.invalidate(comments_key(comment.post_id))
    return updated


async def delete_comment(ctx: FeedContext, comment_id: UUID) -> int:
    """Delete one of the caller's comments; return the number of rows removed."""

    comment, user_id = await _owned_comment(ctx, comment_id, action="delete")
    if comment is None:
        return 0

    deleted = await ctx.store.delete(COMMENTS, filters={"id": comment_id, "user_id": user_id})
    ctx.cache.invalidate(comments_key(comment.post_id))
    ctx.cache.invalidate(posts_key())
    return deleted


__all__ = ["list_comments", "create_comment", "update_comment", "delete_comment"]
