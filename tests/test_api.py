"""HTTP surface: status mapping, multipart post creation and per-request contexts."""
from __future__ import annotations

from io import BytesIO
from typing import Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from community_feed.main import app
from community_feed.store import auth as auth_module
from community_feed.routers.deps import get_blob_store

from conftest import FakeBlobStore, token_for


@pytest.fixture
def fake_blobs() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def client(fake_blobs) -> Iterator[TestClient]:
    app.dependency_overrides[get_blob_store] = lambda: fake_blobs
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _auth(user_id, email=None) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user_id, email)}"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_post_requires_sign_in(client):
    response = client.post("/posts", data={"title": "Hi", "content": "there"})
    assert response.status_code == 401
    assert "sign in" in response.json()["detail"]


def test_create_post_with_attachment_and_read_feed(client, fake_blobs):
    user_id = uuid4()
    headers = _auth(user_id, "ruth@example.com")
    assert client.get("/profiles/me", headers=headers).json()["username"] == "ruth"

    response = client.post(
        "/posts",
        headers=headers,
        data={"title": "Sunday", "content": "Great service #grace #hope"},
        files=[("files", ("photo.png", BytesIO(b"png-bytes"), "image/png"))],
    )
    assert response.status_code == 201
    created = response.json()
    assert created["hashtags"] == ["grace", "hope"]
    assert created["attachments"][0]["kind"] == "image"
    assert len(fake_blobs.objects) == 1

    feed = client.get("/posts").json()["items"]
    assert [item["id"] for item in feed] == [created["id"]]
    assert feed[0]["author"]["username"] == "ruth"

    found = client.get("/posts/search", params={"q": "SUNDAY"}).json()["items"]
    assert [item["id"] for item in found] == [created["id"]]


def test_like_toggle_round_trip(client):
    user_id = uuid4()
    headers = _auth(user_id)
    post_id = client.post("/posts", headers=headers, data={"title": "Hi", "content": "there"}).json()["id"]

    assert client.get(f"/posts/{post_id}/likes/me", headers=headers).json()["liked"] is False
    toggled = client.post(f"/posts/{post_id}/likes/toggle", headers=headers, json={"liked": False})
    assert toggled.json()["liked"] is True
    assert client.get(f"/posts/{post_id}").json()["like_count"] == 1

    client.post(f"/posts/{post_id}/likes/toggle", headers=headers, json={"liked": True})
    assert client.get(f"/posts/{post_id}").json()["like_count"] == 0


def test_comment_edit_by_other_user_is_forbidden(client):
    owner, stranger = uuid4(), uuid4()
    post_id = client.post("/posts", headers=_auth(owner), data={"title": "Hi", "content": "there"}).json()["id"]
    comment = client.post(f"/posts/{post_id}/comments", headers=_auth(owner), json={"content": "mine"}).json()
    assert comment["is_edited"] is False

    response = client.patch(f"/comments/{comment['id']}", headers=_auth(stranger), json={"content": "theirs"})
    assert response.status_code == 403

    response = client.patch(f"/comments/{comment['id']}", headers=_auth(owner), json={"content": "edited"})
    assert response.json() == {"rows_affected": 1}
    (listed,) = client.get(f"/posts/{post_id}/comments").json()["items"]
    assert listed["content"] == "edited"


def test_missing_resources_return_404(client):
    assert client.get(f"/posts/{uuid4()}").status_code == 404
    assert client.get("/profiles/nobody-here").status_code == 404
    assert client.delete(f"/posts/{uuid4()}", headers=_auth(uuid4())).status_code == 404


def test_missing_jwt_secret_is_reported_as_server_error(client, monkeypatch):
    headers = _auth(uuid4())
    monkeypatch.setenv("JWT_SECRET_KEY", "changeme")
    auth_module._get_jwt_secret.cache_clear()
    try:
        response = client.get("/profiles/me", headers=headers)
    finally:
        monkeypatch.undo()
        auth_module._get_jwt_secret.cache_clear()

    assert response.status_code == 500
    assert "JWT_SECRET_KEY" in response.json()["detail"]
