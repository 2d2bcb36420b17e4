"""Devotional routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas import DevotionalListResponse
from ..services import FeedContext, list_devotionals
from .deps import get_feed_context

router = APIRouter(prefix="/devotionals", tags=["devotionals"])


@router.get("", response_model=DevotionalListResponse)
async def devotionals_endpoint(ctx: FeedContext = Depends(get_feed_context)) -> DevotionalListResponse:
    return DevotionalListResponse(items=await list_devotionals(ctx))
