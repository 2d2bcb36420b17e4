"""SQLAlchemy ORM model for community profiles."""
from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from community_feed.database import Base

from .base import utcnow


class Profile(Base):
    __tablename__ = "profiles"

    # Shared with the authenticated identity, never generated here.
    id = Column(UUID(as_uuid=True), primary_key=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    full_name = Column(String(150), nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    church_name = Column(String(255), nullable=True)
    ministry_roles = Column(JSON, nullable=True)
    favorite_bible_verse = Column(String(500), nullable=True)
    website_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )


__all__ = ["Profile"]
