"""Schemas for community profiles."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator


class ProfileRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    full_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None
    church_name: str | None = None
    ministry_roles: list[str] = Field(default_factory=list)
    favorite_bible_verse: str | None = None
    website_url: str | None = None

    @field_validator("ministry_roles", mode="before")
    @classmethod
    def _materialize_roles(cls, value):
        return [] if value is None else value


class ProfileUpdateRequest(BaseModel):
    full_name: str | None = None
    bio: str | None = None
    location: str | None = None
    church_name: str | None = None
    ministry_roles: list[str] | None = None
    favorite_bible_verse: str | None = None
    website_url: HttpUrl | None = None

    @field_validator("website_url", mode="before")
    def clean_website(cls, v):
        if v in (None, "", "None"):
            return None
        return v


__all__ = ["ProfileRecord", "ProfileUpdateRequest"]
