"""Aggregate router exports."""
from .comments import router as comments_router
from .devotionals import router as devotionals_router
from .posts import router as posts_router
from .profiles import router as profiles_router
from .system import router as system_router

__all__ = [
    "comments_router",
    "devotionals_router",
    "posts_router",
    "profiles_router",
    "system_router",
]
