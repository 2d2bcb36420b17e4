"""Routes acting on a single comment."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from ..schemas import CommentUpdate, RowsAffectedResponse
from ..services import FeedContext, delete_comment, update_comment
from .deps import get_feed_context

router = APIRouter(prefix="/comments", tags=["comments"])


@router.patch("/{comment_id}", response_model=RowsAffectedResponse)
async def update_comment_endpoint(
    comment_id: UUID,
    payload: CommentUpdate,
    ctx: FeedContext = Depends(get_feed_context),
) -> RowsAffectedResponse:
    return RowsAffectedResponse(rows_affected=await update_comment(ctx, comment_id, payload.content))


@router.delete("/{comment_id}", response_model=RowsAffectedResponse)
async def delete_comment_endpoint(
    comment_id: UUID,
    ctx: FeedContext = Depends(get_feed_context),
) -> RowsAffectedResponse:
    return RowsAffectedResponse(rows_affected=await delete_comment(ctx, comment_id))
