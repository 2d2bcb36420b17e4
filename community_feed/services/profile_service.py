"""Profile lookup, lazy creation for the caller, owner updates and avatar upload."""
from __future__ import annotations

import logging

from ..cache import posts_key, profile_key, profiles_key, username_key
from ..errors import NotFoundError
from ..schemas.auth import Identity
from ..schemas.posts import FileUpload
from ..schemas.profiles import ProfileRecord, ProfileUpdateRequest
from ..store.base import PROFILES
from ..store.blobs import DEFAULT_CONTENT_TYPE, build_object_key
from .context import FeedContext, require_identity, validate_row

logger = logging.getLogger(__name__)


async def _find_profile(ctx: FeedContext, **filters) -> ProfileRecord | None:
    rows = await ctx.store.query(PROFILES, filters=filters, limit=1)
    if not rows:
        return None
    return validate_row(ProfileRecord, rows[0], table=PROFILES)


async def _available_username(ctx: FeedContext, identity: Identity) -> str:
    base = identity.email_local_part or f"member-{identity.id.hex[:8]}"
    if await _find_profile(ctx, username=base) is None:
        return base
    return f"{base}-{identity.id.hex[:6]}"


async def _get_or_create_own_profile(ctx: FeedContext, identity: Identity) -> ProfileRecord:
    existing = await _find_profile(ctx, id=identity.id)
    if existing is not None:
        return existing

    username = await _available_username(ctx, identity)
    inserted = await ctx.store.insert(PROFILES, {"id": identity.id, "username": username})
    logger.info("Created default profile %r for %s", username, identity.id)
    return validate_row(ProfileRecord, inserted, table=PROFILES)


async def get_profile(ctx: FeedContext, username: str | None = None, *, refresh: bool = False) -> ProfileRecord:
    """Look up a profile by username, or the caller's own profile when no username is given.

    Only the caller's own profile is ever created on demand; an unknown
    username raises :class:`NotFoundError`.
    """

    if username:
        async def _load_by_username() -> ProfileRecord:
            profile = await _find_profile(ctx, username=username)
            if profile is None:
                raise NotFoundError(f"Profile {username!r} not found")
            return profile

        return await ctx.cache.get_or_load(username_key(username), _load_by_username, refresh=refresh)

    identity = await require_identity(ctx, "Please sign in to view your profile")
    return await ctx.cache.get_or_load(
        profile_key(identity.id),
        lambda: _get_or_create_own_profile(ctx, identity),
        refresh=refresh,
    )


async def _apply_patch(ctx: FeedContext, identity: Identity, patch: dict) -> ProfileRecord:
    await _get_or_create_own_profile(ctx, identity)
    if patch:
        await ctx.store.update(PROFILES, patch, filters={"id": identity.id})
    ctx.cache.invalidate(profiles_key())
    # Feed entries embed the author's username and avatar.
    ctx.cache.invalidate(posts_key())
    return await get_profile(ctx)


async def update_profile(ctx: FeedContext, payload: ProfileUpdateRequest) -> ProfileRecord:
    """Apply the fields the caller actually sent to their own profile."""

    identity = await require_identity(ctx, "Please sign in to edit your profile")

    patch = payload.model_dump(exclude_unset=True)
    if "website_url" in patch:
        website = patch["website_url"]
        patch["website_url"] = str(website) if website not in (None, "") else None

    return await _apply_patch(ctx, identity, patch)


async def upload_avatar(ctx: FeedContext, upload: FileUpload) -> ProfileRecord:
    """Store a new avatar image and point the caller's profile at it."""

    identity = await require_identity(ctx, "Please sign in to change your avatar")

    bucket = ctx.settings.avatars_bucket
    key = build_object_key(upload.filename, folder=str(identity.id))
    content_type = (upload.content_type or DEFAULT_CONTENT_TYPE).strip() or DEFAULT_CONTENT_TYPE
    await ctx.blobs.upload_blob(bucket, key, upload.data, content_type)

    return await _apply_patch(ctx, identity, {"avatar_url": ctx.blobs.get_public_url(bucket, key)})


__all__ = ["get_profile", "update_profile", "upload_avatar"]
