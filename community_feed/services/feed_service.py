"""Feed queries and post lifecycle: fetch, search, create with attachments, delete."""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Sequence
from uuid import UUID

from ..cache import author_posts_key, comments_key, post_likes_key, posts_key
from ..errors import FeedError, NotFoundError, UploadError, ValidationFailedError
from ..schemas.auth import Identity
from ..schemas.posts import Attachment, FileUpload, PostRecord
from ..store.base import EMBED_AUTHOR, EMBED_COMMENT_COUNT, EMBED_LIKE_COUNT, POSTS, Order
from ..store.blobs import DEFAULT_CONTENT_TYPE, build_object_key, key_from_public_url
from .context import FeedContext, missing, owns, require_identity, validate_row, validate_rows
from .hashtags import extract_hashtags

logger = logging.getLogger(__name__)

FEED_EMBEDS = (EMBED_AUTHOR, EMBED_COMMENT_COUNT, EMBED_LIKE_COUNT)
NEWEST_FIRST = Order("created_at", ascending=False)


async def _load_posts(ctx: FeedContext, *, filters: dict | None = None, limit: int | None = None) -> list[PostRecord]:
    rows = await ctx.store.query(POSTS, filters=filters, order=NEWEST_FIRST, embed=FEED_EMBEDS, limit=limit)
    return validate_rows(PostRecord, rows, table=POSTS)


async def fetch_feed(ctx: FeedContext, *, refresh: bool = False) -> list[PostRecord]:
    """Return every post newest first, with author summary and derived counts."""

    posts = await ctx.cache.get_or_load(posts_key(), lambda: _load_posts(ctx), refresh=refresh)
    return list(posts)


async def list_posts_by_author(ctx: FeedContext, user_id: UUID, *, refresh: bool = False) -> list[PostRecord]:
    posts = await ctx.cache.get_or_load(
        author_posts_key(user_id),
        lambda: _load_posts(ctx, filters={"user_id": user_id}),
        refresh=refresh,
    )
    return list(posts)


async def search_posts(ctx: FeedContext, term: str | None) -> list[PostRecord]:
    """Case-insensitive substring match on title or content over the cached feed."""

    posts = await fetch_feed(ctx)
    needle = (term or "").strip().lower()
    if not needle:
        return posts
    return [post for post in posts if needle in post.title.lower() or needle in post.content.lower()]


async def get_post(ctx: FeedContext, post_id: UUID) -> PostRecord:
    posts = await _load_posts(ctx, filters={"id": post_id}, limit=1)
    if not posts:
        raise NotFoundError("Post not found")
    return posts[0]


async def _discard_blobs(ctx: FeedContext, bucket: str, keys: Iterable[str]) -> None:
    for key in keys:
        try:
            await ctx.blobs.delete_blob(bucket, key)
        except FeedError as exc:
            logger.warning("Unable to delete orphaned blob %s/%s: %s", bucket, key, exc)


async def _upload_attachments(
    ctx: FeedContext,
    identity: Identity,
    files: Sequence[FileUpload],
) -> tuple[list[Attachment], list[str]]:
    """Upload every file concurrently; any failure fails the batch and removes the rest."""

    if not files:
        return [], []

    bucket = ctx.settings.post_attachments_bucket
    keys = [build_object_key(upload.filename, folder=str(identity.id)) for upload in files]
    content_types = [(upload.content_type or DEFAULT_CONTENT_TYPE).strip() or DEFAULT_CONTENT_TYPE for upload in files]

    results = await asyncio.gather(
        *(
            ctx.blobs.upload_blob(bucket, key, upload.data, content_type)
            for key, upload, content_type in zip(keys, files, content_types)
        ),
        return_exceptions=True,
    )

    uploaded = [key for key, result in zip(keys, results) if not isinstance(result, BaseException)]
    failures = [result for result in results if isinstance(result, BaseException)]
    if failures:
        await _discard_blobs(ctx, bucket, uploaded)
        first = failures[0]
        if isinstance(first, UploadError) or not isinstance(first, Exception):
            raise first
        raise UploadError("Attachment upload failed") from first

    try:
        attachments = [
            Attachment(url=ctx.blobs.get_public_url(bucket, key), type=content_type, name=upload.filename)
            for key, upload, content_type in zip(keys, files, content_types)
        ]
    except Exception as exc:
        await _discard_blobs(ctx, bucket, uploaded)
        if isinstance(exc, FeedError):
            raise
        raise UploadError("Unable to resolve attachment URLs") from exc
    return attachments, keys


async def create_post(
    ctx: FeedContext,
    *,
    title: str,
    content: str,
    hashtags: Sequence[str] | None = None,
    files: Sequence[FileUpload] = (),
) -> PostRecord:
    """Upload attachments, insert the post and invalidate the feed.

    Either every attachment is stored and referenced by the new post, or the
    call raises and no post row exists.
    """

    identity = await require_identity(ctx, "Please sign in to create a post")

    clean_title = (title or "").strip()
    clean_content = (content or "").strip()
    if not clean_title:
        raise ValidationFailedError("Title cannot be empty")
    if not clean_content:
        raise ValidationFailedError("Content cannot be empty")

    tags = list(hashtags) if hashtags is not None else extract_hashtags(clean_content)
    attachments, keys = await _upload_attachments(ctx, identity, files)

    row = {
        "user_id": identity.id,
        "title": clean_title,
        "content": clean_content,
        "attachment_urls": [attachment.model_dump(exclude={"kind"}) for attachment in attachments],
        "hashtags": [tag.lstrip("#") for tag in tags],
        "like_count": 0,
        "comment_count": 0,
    }
    try:
        inserted = await ctx.store.insert(POSTS, row)
    except FeedError:
        await _discard_blobs(ctx, ctx.settings.post_attachments_bucket, keys)
        raise

    ctx.cache.invalidate(posts_key())
    logger.info("Post %s created by %s with %d attachment(s)", inserted.get("id"), identity.id, len(attachments))
    return validate_row(PostRecord, inserted, table=POSTS)


async def delete_post(ctx: FeedContext, post_id: UUID) -> int:
    """Delete one of the caller's posts and its attachment blobs; return rows affected."""

    identity = await require_identity(ctx, "Please sign in to delete posts")

    rows = await ctx.store.query(POSTS, filters={"id": post_id}, limit=1)
    if not rows:
        return missing(ctx, what="post")
    post = validate_row(PostRecord, rows[0], table=POSTS)
    if not owns(ctx, post.user_id, identity, what="posts"):
        return 0

    deleted = await ctx.store.delete(POSTS, filters={"id": post_id, "user_id": identity.id})

    bucket = ctx.settings.post_attachments_bucket
    keys = [key for key in (key_from_public_url(item.url, bucket) for item in post.attachments) if key]
    await _discard_blobs(ctx, bucket, keys)

    ctx.cache.invalidate(posts_key())
    ctx.cache.invalidate(comments_key(post_id))
    ctx.cache.invalidate(post_likes_key(post_id))
    return deleted


__all__ = [
    "fetch_feed",
    "list_posts_by_author",
    "search_posts",
    "get_post",
    "create_post",
    "delete_post",
]
