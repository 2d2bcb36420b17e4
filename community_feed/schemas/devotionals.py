"""Schemas for daily devotionals."""
from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class DevotionalRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    verse: str
    reference: str
    reflection: str
    date: dt.date


class DevotionalListResponse(BaseModel):
    items: list[DevotionalRecord]


__all__ = ["DevotionalRecord", "DevotionalListResponse"]
