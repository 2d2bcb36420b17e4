"""Convenience exports for ORM models."""
from .devotional import Devotional
from .post import Comment, Like, Post
from .profile import Profile

__all__ = [
    "Comment",
    "Devotional",
    "Like",
    "Post",
    "Profile",
]
