"""Error taxonomy raised by the feed synchronization layer."""
from __future__ import annotations


class FeedError(RuntimeError):
    """Base class for every error surfaced by the synchronization layer."""


class AuthError(FeedError):
    """Raised when a mutating operation is attempted without a valid session."""


class FetchError(FeedError):
    """Raised when a read against the remote store fails or returns malformed rows."""


class WriteError(FeedError):
    """Raised when an insert, update or delete against the remote store fails."""


class UploadError(FeedError):
    """Raised when a blob upload fails."""


class ForbiddenError(FeedError):
    """Raised when the caller does not own the row they are trying to change."""


class NotFoundError(FeedError):
    """Raised when a looked-up row does not exist."""


class ValidationFailedError(FeedError):
    """Raised when caller supplied input is rejected before reaching the store."""


class ConfigurationError(FeedError):
    """Raised when required settings or secrets are missing or invalid."""


class StorageConfigurationError(ConfigurationError):
    """Raised when required object storage settings are missing or invalid."""


__all__ = [
    "FeedError",
    "AuthError",
    "FetchError",
    "WriteError",
    "UploadError",
    "ForbiddenError",
    "NotFoundError",
    "ValidationFailedError",
    "ConfigurationError",
    "StorageConfigurationError",
]
