"""Feed query, post creation and deletion through the synchronization layer."""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from community_feed.errors import (
    AuthError,
    FetchError,
    ForbiddenError,
    NotFoundError,
    UploadError,
    ValidationFailedError,
    WriteError,
)
from community_feed.schemas import FileUpload
from community_feed.services import (
    create_post,
    delete_post,
    fetch_feed,
    get_post,
    is_liked_by_me,
    list_posts_by_author,
    search_posts,
    toggle_like,
)
from community_feed.services.hashtags import extract_hashtags
from community_feed.store.base import COMMENTS, POSTS, PROFILES

from conftest import FakeBlobStore, make_context


def _files(*payloads: bytes) -> list[FileUpload]:
    names = ["photo.JPG", "clip.mp4", "notes.pdf", "extra.png"]
    types = ["image/jpeg", "video/mp4", "application/pdf", "image/png"]
    return [
        FileUpload(filename=names[index % 4], content_type=types[index % 4], data=payload)
        for index, payload in enumerate(payloads)
    ]


def test_feed_is_newest_first_with_author_and_counts(store, anonymous):
    author = uuid4()
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)

    async def scenario():
        await store.insert(PROFILES, {"id": author, "username": "ruth"})
        ids = []
        for offset, title in enumerate(["T1", "T2", "T3"]):
            row = await store.insert(
                POSTS,
                {"user_id": author, "title": title, "content": "body", "created_at": base + timedelta(minutes=offset)},
            )
            ids.append(row["id"])
        await store.insert(COMMENTS, {"post_id": ids[0], "user_id": uuid4(), "content": "first!"})

        feed = await fetch_feed(anonymous)
        assert [post.title for post in feed] == ["T3", "T2", "T1"]
        assert feed[0].author is not None and feed[0].author.username == "ruth"
        assert feed[2].comment_count == 1
        assert feed[0].comment_count == 0

    asyncio.run(scenario())


def test_feed_materializes_null_arrays(store, anonymous):
    async def scenario():
        await store.insert(
            POSTS,
            {"user_id": uuid4(), "title": "bare", "content": "body", "attachment_urls": None, "hashtags": None},
        )
        (post,) = await fetch_feed(anonymous)
        assert post.attachments == []
        assert post.hashtags == []

    asyncio.run(scenario())


def test_malformed_rows_are_rejected_as_fetch_errors(store, anonymous):
    async def scenario():
        await store.insert(
            POSTS,
            {"user_id": uuid4(), "title": "broken", "content": "body", "attachment_urls": [{"name": "no url"}]},
        )
        with pytest.raises(FetchError):
            await fetch_feed(anonymous)

    asyncio.run(scenario())


def test_feed_is_served_from_cache_until_refresh(store, alice, alice_id):
    async def scenario():
        assert await fetch_feed(alice) == []
        await store.insert(POSTS, {"user_id": alice_id, "title": "behind the cache", "content": "body"})
        assert await fetch_feed(alice) == []
        refreshed = await fetch_feed(alice, refresh=True)
        assert [post.title for post in refreshed] == ["behind the cache"]

    asyncio.run(scenario())


def test_create_post_uploads_every_attachment(alice, alice_id, blobs):
    async def scenario():
        assert await fetch_feed(alice) == []

        post = await create_post(
            alice,
            title="Sunday",
            content="Praying today #Hope #Faith #Hope",
            files=_files(b"one", b"two", b"three"),
        )

        assert post.user_id == alice_id
        assert post.hashtags == ["Hope", "Faith", "Hope"]
        assert post.hashtags == extract_hashtags(post.content)
        assert post.like_count == 0 and post.comment_count == 0
        assert [attachment.name for attachment in post.attachments] == ["photo.JPG", "clip.mp4", "notes.pdf"]
        assert [attachment.kind for attachment in post.attachments] == ["image", "video", "file"]
        assert len(blobs.objects) == 3
        for attachment in post.attachments:
            assert attachment.url.startswith(f"https://cdn.example.test/post-attachments/{alice_id}/")
        assert post.attachments[0].url.endswith(".jpg")

        feed = await fetch_feed(alice)
        assert [item.id for item in feed] == [post.id]
        assert len(feed[0].attachments) == 3

    asyncio.run(scenario())


def test_create_post_uses_caller_hashtags_when_given(alice):
    post = asyncio.run(create_post(alice, title="Tagged", content="no tags here", hashtags=["#Grace", "Peace"]))
    assert post.hashtags == ["Grace", "Peace"]


def test_create_post_requires_a_session(anonymous, blobs):
    with pytest.raises(AuthError):
        asyncio.run(create_post(anonymous, title="t", content="c", files=_files(b"x")))
    assert blobs.objects == {}


def test_create_post_rejects_blank_fields(alice):
    with pytest.raises(ValidationFailedError):
        asyncio.run(create_post(alice, title="  ", content="body"))
    with pytest.raises(ValidationFailedError):
        asyncio.run(create_post(alice, title="title", content=""))


def test_failed_upload_creates_no_post_and_discards_uploaded_blobs(store, alice_id):
    blobs = FakeBlobStore(fail_on=(b"bad",))
    ctx = make_context(store, blobs, alice_id, email="alice@example.com")

    async def scenario():
        with pytest.raises(UploadError):
            await create_post(ctx, title="Partial", content="body", files=_files(b"good", b"bad", b"fine"))
        assert await store.query(POSTS) == []

    asyncio.run(scenario())
    assert blobs.objects == {}
    assert len(blobs.deleted) == 2


def test_failed_insert_discards_uploaded_blobs(alice, blobs, monkeypatch):
    async def _refuse(table, row):
        raise WriteError("Failed to write to posts")

    monkeypatch.setattr(alice.store, "insert", _refuse)

    with pytest.raises(WriteError):
        asyncio.run(create_post(alice, title="Doomed", content="body", files=_files(b"a", b"b")))
    assert blobs.objects == {}
    assert len(blobs.deleted) == 2


def test_compensation_failures_are_logged_not_raised(store, alice_id, caplog):
    blobs = FakeBlobStore(fail_on=(b"bad",), fail_deletes=True)
    ctx = make_context(store, blobs, alice_id)

    with pytest.raises(UploadError):
        asyncio.run(create_post(ctx, title="Partial", content="body", files=_files(b"good", b"bad")))
    assert "Unable to delete orphaned blob" in caplog.text


def test_search_and_author_listing(alice, bob, alice_id):
    async def scenario():
        await create_post(alice, title="Morning Prayer", content="Thankful")
        await create_post(bob, title="Choir practice", content="Bring your PRAYER books")
        await create_post(bob, title="Potluck", content="Bring a dish")

        titles = {post.title for post in await search_posts(alice, "prayer")}
        assert titles == {"Morning Prayer", "Choir practice"}
        assert len(await search_posts(alice, "  ")) == 3

        mine = await list_posts_by_author(alice, alice_id)
        assert [post.title for post in mine] == ["Morning Prayer"]

    asyncio.run(scenario())


def test_get_post_and_missing_post(alice):
    async def scenario():
        created = await create_post(alice, title="Single", content="body")
        assert (await get_post(alice, created.id)).title == "Single"
        with pytest.raises(NotFoundError):
            await get_post(alice, uuid4())

    asyncio.run(scenario())


def test_delete_post_is_owner_only_and_removes_blobs(alice, bob, blobs):
    async def scenario():
        post = await create_post(alice, title="Mine", content="body", files=_files(b"img"))

        with pytest.raises(ForbiddenError):
            await delete_post(bob, post.id)

        assert await delete_post(alice, post.id) == 1
        assert await fetch_feed(alice) == []
        with pytest.raises(NotFoundError):
            await delete_post(alice, post.id)

    asyncio.run(scenario())
    assert blobs.objects == {}


def test_delete_post_fails_silently_for_non_owner_in_silent_mode(store, blobs, alice, bob_id):
    bob_silent = make_context(store, blobs, bob_id, silent_ownership_failures=True)

    async def scenario():
        post = await create_post(alice, title="Mine", content="body")
        assert await delete_post(bob_silent, post.id) == 0
        assert await delete_post(bob_silent, uuid4()) == 0
        assert len(await fetch_feed(alice, refresh=True)) == 1

    asyncio.run(scenario())


def test_delete_post_forgets_cached_like_state(alice):
    async def scenario():
        post = await create_post(alice, title="Liked", content="body")
        await toggle_like(alice, post.id, await is_liked_by_me(alice, post.id))
        assert await is_liked_by_me(alice, post.id) is True

        assert await delete_post(alice, post.id) == 1
        assert await is_liked_by_me(alice, post.id) is False

    asyncio.run(scenario())


class _UnresolvableUrlBlobStore(FakeBlobStore):
    def get_public_url(self, bucket: str, key: str) -> str:
        raise ValueError("no public endpoint configured")


def test_unresolvable_urls_discard_uploaded_blobs(store, alice_id):
    blobs = _UnresolvableUrlBlobStore()
    ctx = make_context(store, blobs, alice_id, email="alice@example.com")

    async def scenario():
        with pytest.raises(UploadError):
            await create_post(ctx, title="Lost", content="body", files=_files(b"a", b"b"))
        assert await store.query(POSTS) == []

    asyncio.run(scenario())
    assert blobs.objects == {}
    assert len(blobs.deleted) == 2
