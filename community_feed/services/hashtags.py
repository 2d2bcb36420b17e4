"""Hashtag extraction from post bodies."""
from __future__ import annotations

import re

# ASCII word characters, matching the web client that produced the stored data.
HASHTAG_PATTERN = re.compile(r"#(\w+)", re.ASCII)


def extract_hashtags(text: str | None) -> list[str]:
    """Return hashtags in first-seen order without the leading ``#``; duplicates are kept."""

    return HASHTAG_PATTERN.findall(text or "")


__all__ = ["HASHTAG_PATTERN", "extract_hashtags"]
