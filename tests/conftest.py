"""Shared fixtures: a SQLite-backed store, fake blob storage and signed-in callers."""
from __future__ import annotations

import os
from typing import Iterator
from uuid import UUID, uuid4

import pytest
from sqlalchemy import delete

# Ensure the database URL and JWT secret are available before importing application modules.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_community_feed.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from community_feed.cache import QueryCache  # noqa: E402
from community_feed.config import get_settings  # noqa: E402
from community_feed.database import Base, SessionLocal, engine  # noqa: E402
from community_feed.errors import UploadError, WriteError  # noqa: E402
from community_feed.models import Comment, Devotional, Like, Post, Profile  # noqa: E402
from community_feed.services.context import FeedContext  # noqa: E402
from community_feed.store.auth import TokenSessionProvider, create_access_token  # noqa: E402
from community_feed.store.sql import SqlRemoteStore  # noqa: E402


class FakeBlobStore:
    """In-test stand-in for object storage; payloads listed in ``fail_on`` are rejected."""

    def __init__(self, *, fail_on: tuple[bytes, ...] = (), fail_deletes: bool = False) -> None:
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}
        self.deleted: list[tuple[str, str]] = []
        self.fail_on = set(fail_on)
        self.fail_deletes = fail_deletes

    async def upload_blob(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        if data in self.fail_on:
            raise UploadError("Upload to object storage failed")
        self.objects[(bucket, key)] = (data, content_type)

    def get_public_url(self, bucket: str, key: str) -> str:
        return f"https://cdn.example.test/{bucket}/{key}"

    async def delete_blob(self, bucket: str, key: str) -> None:
        if self.fail_deletes:
            raise WriteError("Unable to delete media from storage")
        self.deleted.append((bucket, key))
        self.objects.pop((bucket, key), None)


@pytest.fixture(scope="session", autouse=True)
def _create_schema() -> Iterator[None]:
    """Create all tables needed for the test session."""

    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    """Remove persisted rows between tests."""

    with SessionLocal() as session:
        for model in (Like, Comment, Post, Profile, Devotional):
            session.execute(delete(model))
        session.commit()
    yield


@pytest.fixture
def store() -> SqlRemoteStore:
    return SqlRemoteStore()


@pytest.fixture
def blobs() -> FakeBlobStore:
    return FakeBlobStore()


def token_for(user_id: UUID, email: str | None = None) -> str:
    return create_access_token(user_id, email=email)


def make_context(
    store,
    blobs,
    user_id: UUID | None = None,
    *,
    email: str | None = None,
    silent_ownership_failures: bool = False,
) -> FeedContext:
    token = token_for(user_id, email) if user_id is not None else None
    settings = get_settings().model_copy(update={"silent_ownership_failures": silent_ownership_failures})
    return FeedContext(
        store=store,
        blobs=blobs,
        sessions=TokenSessionProvider(token),
        cache=QueryCache(),
        settings=settings,
    )


@pytest.fixture
def alice_id() -> UUID:
    return uuid4()


@pytest.fixture
def bob_id() -> UUID:
    return uuid4()


@pytest.fixture
def alice(store, blobs, alice_id) -> FeedContext:
    return make_context(store, blobs, alice_id, email="alice@example.com")


@pytest.fixture
def bob(store, blobs, bob_id) -> FeedContext:
    return make_context(store, blobs, bob_id, email="bob@example.com")


@pytest.fixture
def anonymous(store, blobs) -> FeedContext:
    return make_context(store, blobs)
