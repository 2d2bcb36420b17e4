"""Pydantic schema exports."""
from .auth import AuthSession, Identity
from .devotionals import DevotionalListResponse, DevotionalRecord
from .posts import (
    Attachment,
    CommentCreate,
    CommentListResponse,
    CommentRecord,
    CommentUpdate,
    FileUpload,
    LikeStateResponse,
    PostAuthor,
    PostFeedResponse,
    PostRecord,
    RowsAffectedResponse,
)
from .profiles import ProfileRecord, ProfileUpdateRequest

__all__ = [
    "Attachment",
    "AuthSession",
    "CommentCreate",
    "CommentListResponse",
    "CommentRecord",
    "CommentUpdate",
    "DevotionalListResponse",
    "DevotionalRecord",
    "FileUpload",
    "Identity",
    "LikeStateResponse",
    "PostAuthor",
    "PostFeedResponse",
    "PostRecord",
    "ProfileRecord",
    "ProfileUpdateRequest",
    "RowsAffectedResponse",
]
