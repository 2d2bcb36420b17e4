"""SQLAlchemy ORM model for daily devotionals."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, Date, String, Text
from sqlalchemy.dialects.postgresql import UUID

from community_feed.database import Base


class Devotional(Base):
    __tablename__ = "devotionals"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    verse = Column(Text, nullable=False)
    reference = Column(String(255), nullable=False)
    reflection = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)


__all__ = ["Devotional"]
