"""Post, like and comment routes over the feed synchronization layer."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import BaseModel

from ..schemas import (
    CommentCreate,
    CommentListResponse,
    CommentRecord,
    FileUpload,
    LikeStateResponse,
    PostFeedResponse,
    PostRecord,
    RowsAffectedResponse,
)
from ..services import (
    FeedContext,
    create_comment,
    create_post,
    delete_post,
    fetch_feed,
    get_post,
    is_liked_by_me,
    list_comments,
    list_posts_by_author,
    search_posts,
    toggle_like,
)
from .deps import get_feed_context

router = APIRouter(prefix="/posts", tags=["posts"])


class LikeToggleRequest(BaseModel):
    liked: bool


async def _read_upload(file: UploadFile) -> FileUpload:
    data = await file.read()
    return FileUpload(filename=file.filename or "upload", content_type=file.content_type, data=data)


@router.get("", response_model=PostFeedResponse)
async def feed_endpoint(ctx: FeedContext = Depends(get_feed_context)) -> PostFeedResponse:
    return PostFeedResponse(items=await fetch_feed(ctx))


@router.get("/search", response_model=PostFeedResponse)
async def search_endpoint(
    q: str = Query("", max_length=200),
    ctx: FeedContext = Depends(get_feed_context),
) -> PostFeedResponse:
    return PostFeedResponse(items=await search_posts(ctx, q))


@router.get("/by-user/{user_id}", response_model=PostFeedResponse)
async def posts_by_user_endpoint(user_id: UUID, ctx: FeedContext = Depends(get_feed_context)) -> PostFeedResponse:
    return PostFeedResponse(items=await list_posts_by_author(ctx, user_id))


@router.post("", response_model=PostRecord, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    title: str = Form(..., min_length=1),
    content: str = Form(..., min_length=1),
    files: list[UploadFile] | None = File(None),
    ctx: FeedContext = Depends(get_feed_context),
) -> PostRecord:
    """Create a post from ``multipart/form-data``; hashtags are derived from ``content``."""

    uploads = [await _read_upload(file) for file in files or []]
    return await create_post(ctx, title=title, content=content, files=uploads)


@router.get("/{post_id}", response_model=PostRecord)
async def get_post_endpoint(post_id: UUID, ctx: FeedContext = Depends(get_feed_context)) -> PostRecord:
    return await get_post(ctx, post_id)


@router.delete("/{post_id}", response_model=RowsAffectedResponse)
async def delete_post_endpoint(post_id: UUID, ctx: FeedContext = Depends(get_feed_context)) -> RowsAffectedResponse:
    return RowsAffectedResponse(rows_affected=await delete_post(ctx, post_id))


@router.get("/{post_id}/likes/me", response_model=LikeStateResponse)
async def like_state_endpoint(post_id: UUID, ctx: FeedContext = Depends(get_feed_context)) -> LikeStateResponse:
    return LikeStateResponse(post_id=post_id, liked=await is_liked_by_me(ctx, post_id))


@router.post("/{post_id}/likes/toggle", response_model=LikeStateResponse)
async def toggle_like_endpoint(
    post_id: UUID,
    payload: LikeToggleRequest,
    ctx: FeedContext = Depends(get_feed_context),
) -> LikeStateResponse:
    liked = await toggle_like(ctx, post_id, payload.liked)
    return LikeStateResponse(post_id=post_id, liked=liked)


@router.get("/{post_id}/comments", response_model=CommentListResponse)
async def list_comments_endpoint(post_id: UUID, ctx: FeedContext = Depends(get_feed_context)) -> CommentListResponse:
    return CommentListResponse(items=await list_comments(ctx, post_id))


@router.post("/{post_id}/comments", response_model=CommentRecord, status_code=status.HTTP_201_CREATED)
async def create_comment_endpoint(
    post_id: UUID,
    payload: CommentCreate,
    ctx: FeedContext = Depends(get_feed_context),
) -> CommentRecord:
    return await create_comment(ctx, post_id, payload.content)
