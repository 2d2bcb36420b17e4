"""S3-compatible object storage for post attachments and avatars."""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable
from urllib.parse import unquote, urlparse

from boto3.session import Session
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from ..config import get_settings
from ..errors import StorageConfigurationError, UploadError, WriteError
from ..security.secrets import MissingSecretError, is_placeholder, require_secret

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class StorageConfig:
    """Runtime configuration extracted from settings and secrets."""

    key: str
    secret: str
    region: str
    endpoint: str
    public_url: str


@lru_cache(maxsize=1)
def load_storage_config() -> StorageConfig:
    """Read and validate object storage configuration."""

    settings = get_settings()
    required = {
        "STORAGE_REGION": settings.storage_region,
        "STORAGE_ENDPOINT": settings.storage_endpoint,
    }
    missing = [name for name, value in required.items() if is_placeholder(value)]
    if missing:
        raise StorageConfigurationError("Missing required storage configuration: " + ", ".join(sorted(missing)))

    try:
        key = require_secret("STORAGE_KEY")
        secret = require_secret("STORAGE_SECRET")
    except MissingSecretError as exc:
        raise StorageConfigurationError(str(exc)) from exc

    endpoint = (settings.storage_endpoint or "").strip().rstrip("/")
    if not urlparse(endpoint).scheme:
        endpoint = f"https://{endpoint.lstrip(':/')}"
    if not urlparse(endpoint).netloc:
        raise StorageConfigurationError("STORAGE_ENDPOINT must include a hostname.")

    public_url = (settings.storage_public_url or "").strip().rstrip("/") or endpoint

    return StorageConfig(
        key=key,
        secret=secret,
        region=(settings.storage_region or "").strip(),
        endpoint=endpoint,
        public_url=public_url,
    )


@lru_cache(maxsize=1)
def get_storage_client() -> BaseClient:
    """Create a singleton boto3 client for storage interactions."""

    config = load_storage_config()
    session = Session()
    return session.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.endpoint,
        aws_access_key_id=config.key,
        aws_secret_access_key=config.secret,
    )


def _sanitize_segments(parts: Iterable[str]) -> list[str]:
    """Sanitize path segments to be safe for object keys."""

    sanitized: list[str] = []
    for part in parts:
        if part in {"", ".", ".."}:
            continue
        cleaned = re.sub(r"[^A-Za-z0-9._-]", "-", part.strip())
        cleaned = re.sub(r"-+", "-", cleaned).strip("-._")
        if cleaned:
            sanitized.append(cleaned)
    return sanitized


def build_object_key(filename: str | None, folder: str | None = None) -> str:
    """Generate a collision-resistant key: random hex plus the original extension."""

    extension = Path(filename or "").suffix.lower()
    if extension and not re.fullmatch(r"\.[A-Za-z0-9]{1,10}", extension):
        extension = ""

    folder_segments = _sanitize_segments((folder or "").replace("\\", "/").split("/"))
    safe_folder = "/".join(folder_segments)

    unique_name = uuid.uuid4().hex
    key = f"{safe_folder}/{unique_name}{extension}" if safe_folder else f"{unique_name}{extension}"
    return key.lstrip("/")


def key_from_public_url(url: str, bucket: str) -> str | None:
    """Recover the object key from a public URL built by :meth:`SpacesBlobStore.get_public_url`."""

    path = unquote(urlparse(url).path)
    marker = f"/{bucket}/"
    index = path.find(marker)
    if index < 0:
        return None
    key = path[index + len(marker):]
    return key or None


class SpacesBlobStore:
    """Blob store backed by any S3-compatible endpoint (path-style public URLs)."""

    def __init__(self, client: BaseClient | None = None, config: StorageConfig | None = None) -> None:
        self._client = client
        self._config = config

    @property
    def config(self) -> StorageConfig:
        if self._config is None:
            self._config = load_storage_config()
        return self._config

    @property
    def client(self) -> BaseClient:
        if self._client is None:
            self._client = get_storage_client()
        return self._client

    async def upload_blob(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        s3_client = self.client
        normalized_key = key.lstrip("/")
        if not normalized_key:
            raise UploadError("Invalid object key generated for upload")
        mime = (content_type or DEFAULT_CONTENT_TYPE).strip() or DEFAULT_CONTENT_TYPE

        def _upload() -> None:
            try:
                s3_client.put_object(
                    Bucket=bucket,
                    Key=normalized_key,
                    Body=data,
                    ContentType=mime,
                    ACL="public-read",
                )
            except (ClientError, BotoCoreError) as exc:
                logger.exception("Upload of %s/%s failed", bucket, normalized_key)
                raise UploadError("Upload to object storage failed") from exc

        await run_in_threadpool(_upload)

    def get_public_url(self, bucket: str, key: str) -> str:
        base = self.config.public_url.rstrip("/")
        return f"{base}/{bucket}/{key.lstrip('/')}"

    async def delete_blob(self, bucket: str, key: str) -> None:
        if not key:
            return
        s3_client = self.client
        normalized_key = key.lstrip("/")

        def _delete() -> None:
            try:
                s3_client.delete_object(Bucket=bucket, Key=normalized_key)
            except (ClientError, BotoCoreError) as exc:
                logger.exception("Failed to delete storage object %s/%s", bucket, normalized_key)
                raise WriteError("Unable to delete media from storage") from exc

        await run_in_threadpool(_delete)


__all__ = [
    "StorageConfig",
    "SpacesBlobStore",
    "build_object_key",
    "key_from_public_url",
    "load_storage_config",
    "get_storage_client",
]
