"""
Humanity Notary — Feed

The public wall: an append-only, most-recent-first list of posts whose
certificates were verified, persisted write-through to a JSON file.
"""

from notary.systems.feed.store import FeedStore
from notary.systems.feed.types import Post

__all__ = ["FeedStore", "Post"]
