"""
Humanity Notary — Feed Store

Durable, append-only feed of published posts, most recent first.

Persistence is write-through: every append rewrites the whole feed file
(atomically, via a sibling temp file and ``os.replace``) before the call
returns. The in-memory feed is only updated once the write succeeded, so
a failed write never leaves memory ahead of disk.

All mutations go through one ``asyncio.Lock``; id assignment happens
under the same lock, so concurrent publishes cannot collide on ids or
interleave writes. Single-process only.
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from notary.systems.feed.types import Post
from notary.systems.notary.errors import PersistenceError

logger = structlog.get_logger("notary.feed.store")

DEFAULT_TIMESTAMP_FORMAT = "%I:%M:%S %p"

_POSTS = TypeAdapter(list[Post])


def _local_now() -> datetime:
    return datetime.now().astimezone()


class FeedStore:
    """
    The process-wide feed.

    ``path=None`` gives a purely in-memory store.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self._path = Path(path) if path is not None else None
        self._timestamp_format = timestamp_format
        self._clock = clock
        self._posts: list[Post] = []
        self._lock = asyncio.Lock()
        self._loaded = False
        self._logger = logger.bind(component="feed_store")

    # ─── Lifecycle ──────────────────────────────────────────────────

    def load(self) -> list[Post]:
        """
        Load prior posts from disk.

        A missing file means an empty feed. A corrupt file is logged and
        also yields an empty feed; it is replaced on the next append.
        """
        self._posts = []
        self._loaded = True

        if self._path is None or not self._path.exists():
            self._logger.info("feed_initialized_empty", path=str(self._path))
            return self.snapshot()

        try:
            raw = json.loads(self._path.read_text("utf-8"))
            posts = _POSTS.validate_python(raw)
        except (OSError, ValueError, ValidationError) as exc:
            self._logger.error(
                "feed_load_failed",
                path=str(self._path),
                error=str(exc),
            )
            return self.snapshot()

        # Most recent first regardless of how the file was ordered.
        self._posts = sorted(posts, key=lambda p: p.id, reverse=True)
        self._logger.info("feed_loaded", path=str(self._path), posts=len(self._posts))
        return self.snapshot()

    # ─── Reads ──────────────────────────────────────────────────────

    def snapshot(self) -> list[Post]:
        """A copy of the feed, most recent first."""
        return list(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    @property
    def last_id(self) -> int:
        return self._posts[0].id if self._posts else 0

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "loaded": self._loaded,
            "path": str(self._path) if self._path else None,
            "posts": len(self._posts),
            "last_id": self.last_id,
        }

    # ─── Writes ─────────────────────────────────────────────────────

    async def append(self, post: Post) -> None:
        """Prepend ``post`` and persist the whole feed before returning."""
        async with self._lock:
            self._append_locked(post)

    async def publish(self, content: str, author_id: str) -> Post:
        """Create the next sequential post for ``content`` and append it."""
        async with self._lock:
            post = Post(
                id=self.last_id + 1,
                content=content,
                author_id=author_id,
                timestamp=self._clock().strftime(self._timestamp_format),
            )
            self._append_locked(post)
        return post

    def _append_locked(self, post: Post) -> None:
        if post.id <= self.last_id:
            raise ValueError(
                f"Post id {post.id} must be greater than the current last id {self.last_id}"
            )

        updated = [post, *self._posts]
        self._persist(updated)
        self._posts = updated
        self._logger.info(
            "post_appended",
            post_id=post.id,
            author_id=post.author_id,
            feed_size=len(updated),
        )

    def _persist(self, posts: list[Post]) -> None:
        if self._path is None:
            return

        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                _POSTS.dump_json(posts, indent=2).decode("utf-8"),
                encoding="utf-8",
            )
            os.replace(tmp_path, self._path)
        except OSError as exc:
            self._logger.error("feed_persist_failed", path=str(self._path), error=str(exc))
            raise PersistenceError(f"Feed could not be persisted: {exc}") from exc
