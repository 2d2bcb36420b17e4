"""Pydantic schemas for posts, attachments and comments.

Rows coming back from the remote store are validated here before any service
code touches them: nullable array columns are normalised to empty lists and
anything that does not fit the shape is rejected.
"""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator

AttachmentKind = Literal["image", "video", "file"]


class Attachment(BaseModel):
    """A stored binary referenced from its parent post."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1)
    type: str = "application/octet-stream"
    name: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def kind(self) -> AttachmentKind:
        mime = self.type.lower()
        if mime.startswith("image/"):
            return "image"
        if mime.startswith("video/"):
            return "video"
        return "file"


class FileUpload(BaseModel):
    """A binary handed to post creation or avatar upload."""

    filename: str
    content_type: str | None = None
    data: bytes


class PostAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    avatar_url: str | None = None


class PostRecord(BaseModel):
    """A feed entry with its author summary and derived engagement counts."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    user_id: UUID
    title: str
    content: str
    created_at: datetime
    attachments: list[Attachment] = Field(
        default_factory=list,
        validation_alias=AliasChoices("attachments", "attachment_urls"),
    )
    hashtags: list[str] = Field(default_factory=list)
    like_count: int = 0
    comment_count: int = 0
    author: PostAuthor | None = None

    @field_validator("attachments", mode="before")
    @classmethod
    def _materialize_attachments(cls, value):
        return [] if value is None else value

    @field_validator("hashtags", mode="before")
    @classmethod
    def _materialize_hashtags(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [tag.lstrip("#") if isinstance(tag, str) else tag for tag in value]
        return value


class PostFeedResponse(BaseModel):
    """Envelope used when returning a collection of posts."""

    items: list[PostRecord]


class LikeStateResponse(BaseModel):
    post_id: UUID
    liked: bool


class CommentRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_edited(self) -> bool:
        return self.updated_at != self.created_at


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class CommentListResponse(BaseModel):
    items: list[CommentRecord]


class RowsAffectedResponse(BaseModel):
    rows_affected: int


__all__ = [
    "Attachment",
    "AttachmentKind",
    "FileUpload",
    "PostAuthor",
    "PostRecord",
    "PostFeedResponse",
    "LikeStateResponse",
    "CommentRecord",
    "CommentCreate",
    "CommentUpdate",
    "CommentListResponse",
    "RowsAffectedResponse",
]
