import asyncio
from uuid import uuid4

import pytest

from community_feed.cache import QueryCache, author_posts_key, comments_key, posts_key


def test_get_or_load_caches_until_invalidated():
    cache = QueryCache()
    calls = []

    async def loader():
        calls.append(1)
        return len(calls)

    async def scenario():
        assert await cache.get_or_load(posts_key(), loader) == 1
        assert await cache.get_or_load(posts_key(), loader) == 1
        cache.invalidate(posts_key())
        assert await cache.get_or_load(posts_key(), loader) == 2
        assert await cache.get_or_load(posts_key(), loader, refresh=True) == 3

    asyncio.run(scenario())
    assert len(calls) == 3


def test_invalidate_removes_nested_keys_only():
    cache = QueryCache()
    author = uuid4()
    post_a, post_b = uuid4(), uuid4()
    cache.set(posts_key(), ["feed"])
    cache.set(author_posts_key(author), ["mine"])
    cache.set(comments_key(post_a), ["a"])
    cache.set(comments_key(post_b), ["b"])

    assert cache.invalidate(posts_key()) == 2
    assert posts_key() not in cache
    assert author_posts_key(author) not in cache

    assert cache.invalidate(comments_key(post_a)) == 1
    assert comments_key(post_b) in cache
    assert cache.invalidate(("missing",)) == 0


def test_loader_failure_leaves_cache_untouched():
    cache = QueryCache()

    async def failing():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(cache.get_or_load(posts_key(), failing))
    assert len(cache) == 0
