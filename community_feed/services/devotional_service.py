"""Read-only daily devotionals."""
from __future__ import annotations

from ..cache import devotionals_key
from ..schemas.devotionals import DevotionalRecord
from ..store.base import DEVOTIONALS, Order
from .context import FeedContext, validate_rows


async def list_devotionals(ctx: FeedContext, *, refresh: bool = False) -> list[DevotionalRecord]:
    """Return devotionals with the most recent date first."""

    async def _load() -> list[DevotionalRecord]:
        rows = await ctx.store.query(DEVOTIONALS, order=Order("date", ascending=False))
        return validate_rows(DevotionalRecord, rows, table=DEVOTIONALS)

    devotionals = await ctx.cache.get_or_load(devotionals_key(), _load, refresh=refresh)
    return list(devotionals)


__all__ = ["list_devotionals"]
