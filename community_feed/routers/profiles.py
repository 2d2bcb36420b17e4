"""Profile routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from ..schemas import FileUpload, ProfileRecord, ProfileUpdateRequest
from ..services import FeedContext, get_profile, update_profile, upload_avatar
from .deps import get_feed_context

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileRecord)
async def my_profile_endpoint(ctx: FeedContext = Depends(get_feed_context)) -> ProfileRecord:
    """Return the caller's profile, creating a default one on first access."""
    return await get_profile(ctx)


@router.put("/me", response_model=ProfileRecord)
async def update_my_profile_endpoint(
    payload: ProfileUpdateRequest,
    ctx: FeedContext = Depends(get_feed_context),
) -> ProfileRecord:
    return await update_profile(ctx, payload)


@router.post("/me/avatar", response_model=ProfileRecord)
async def upload_my_avatar_endpoint(
    file: UploadFile = File(...),
    ctx: FeedContext = Depends(get_feed_context),
) -> ProfileRecord:
    data = await file.read()
    upload = FileUpload(filename=file.filename or "avatar", content_type=file.content_type, data=data)
    return await upload_avatar(ctx, upload)


@router.get("/{username}", response_model=ProfileRecord)
async def profile_by_username_endpoint(username: str, ctx: FeedContext = Depends(get_feed_context)) -> ProfileRecord:
    return await get_profile(ctx, username)
