"""Convenience exports for the feed synchronization layer."""
from .comment_service import create_comment, delete_comment, list_comments, update_comment
from .context import FeedContext, require_identity
from .devotional_service import list_devotionals
from .feed_service import create_post, delete_post, fetch_feed, get_post, list_posts_by_author, search_posts
from .hashtags import extract_hashtags
from .like_service import is_liked_by_me, toggle_like
from .profile_service import get_profile, update_profile, upload_avatar

__all__ = [
    "FeedContext",
    "require_identity",
    "extract_hashtags",
    "fetch_feed",
    "list_posts_by_author",
    "search_posts",
    "get_post",
    "create_post",
    "delete_post",
    "is_liked_by_me",
    "toggle_like",
    "list_comments",
    "create_comment",
    "update_comment",
    "delete_comment",
    "get_profile",
    "update_profile",
    "upload_avatar",
    "list_devotionals",
]
