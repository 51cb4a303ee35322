"""
Unit tests for the FeedStore.

Tests ordering, id assignment, write-through persistence and recovery
from a corrupt feed file.
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime
from pathlib import Path

import pytest

from notary.systems.feed.store import FeedStore
from notary.systems.feed.types import Post
from notary.systems.notary.errors import PersistenceError


def fixed_clock() -> datetime:
    return datetime(2024, 5, 1, 15, 4, 5)


class TestOrdering:
    @pytest.mark.asyncio
    async def test_publish_assigns_sequential_ids(self, feed_store: FeedStore):
        a = await feed_store.publish("A", "0xAAAAAAAA")
        b = await feed_store.publish("B", "0xBBBBBBBB")

        assert (a.id, b.id) == (1, 2)
        assert feed_store.snapshot() == [b, a]

    @pytest.mark.asyncio
    async def test_snapshot_is_a_copy(self, feed_store: FeedStore):
        await feed_store.publish("A", "0xAAAAAAAA")
        snapshot = feed_store.snapshot()
        snapshot.clear()
        assert len(feed_store) == 1

    @pytest.mark.asyncio
    async def test_concurrent_publishes_get_unique_ids(self, feed_store: FeedStore):
        posts = await asyncio.gather(
            *(feed_store.publish(f"post {i}", "0x00000000") for i in range(20))
        )
        assert sorted(p.id for p in posts) == list(range(1, 21))
        assert [p.id for p in feed_store.snapshot()] == list(range(20, 0, -1))

    @pytest.mark.asyncio
    async def test_append_rejects_stale_id(self, feed_store: FeedStore):
        await feed_store.publish("A", "0xAAAAAAAA")
        with pytest.raises(ValueError):
            await feed_store.append(Post(id=1, content="dup", author_id="x", timestamp="now"))

    @pytest.mark.asyncio
    async def test_append_prebuilt_post(self, feed_store: FeedStore):
        post = Post(id=7, content="seven", author_id="x", timestamp="now")
        await feed_store.append(post)
        assert feed_store.snapshot() == [post]
        assert feed_store.last_id == 7

    @pytest.mark.asyncio
    async def test_human_readable_timestamp(self, tmp_path: Path):
        store = FeedStore(tmp_path / "feed.json", clock=fixed_clock)
        store.load()
        post = await store.publish("A", "0xAAAAAAAA")
        assert post.timestamp == "03:04:05 PM"

    @pytest.mark.asyncio
    async def test_custom_timestamp_format(self, tmp_path: Path):
        store = FeedStore(tmp_path / "feed.json", timestamp_format="%H:%M", clock=fixed_clock)
        store.load()
        assert (await store.publish("A", "x")).timestamp == "15:04"


class TestPersistence:
    @pytest.mark.asyncio
    async def test_survives_reload(self, tmp_path: Path):
        path = tmp_path / "feed.json"
        store = FeedStore(path)
        store.load()
        a = await store.publish("A", "0xAAAAAAAA")
        b = await store.publish("B", "0xBBBBBBBB")

        reloaded = FeedStore(path)
        assert reloaded.load() == [b, a]

        c = await reloaded.publish("C", "0xCCCCCCCC")
        assert c.id == 3

    @pytest.mark.asyncio
    async def test_file_is_json_list_most_recent_first(self, tmp_path: Path):
        path = tmp_path / "feed.json"
        store = FeedStore(path)
        store.load()
        await store.publish("A", "0xAAAAAAAA")
        await store.publish("B", "0xBBBBBBBB")

        raw = json.loads(path.read_text())
        assert [entry["content"] for entry in raw] == ["B", "A"]
        assert set(raw[0]) == {"id", "content", "author_id", "timestamp"}
        assert not (tmp_path / "feed.json.tmp").exists()

    def test_missing_file_starts_empty(self, tmp_path: Path):
        assert FeedStore(tmp_path / "absent.json").load() == []

    @pytest.mark.parametrize("contents", ["{not json", '{"id": 1}', '[{"id": "x"}]'])
    @pytest.mark.asyncio
    async def test_corrupt_file_starts_empty(self, tmp_path: Path, contents: str):
        path = tmp_path / "feed.json"
        path.write_text(contents)

        store = FeedStore(path)
        assert store.load() == []

        await store.publish("fresh", "0x00000000")
        assert FeedStore(path).load()[0].content == "fresh"

    @pytest.mark.asyncio
    async def test_write_failure_leaves_feed_unchanged(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = FeedStore(blocker / "feed.json")
        store.load()

        with pytest.raises(PersistenceError):
            await store.publish("A", "0xAAAAAAAA")
        assert store.snapshot() == []
        assert store.last_id == 0

    @pytest.mark.asyncio
    async def test_in_memory_store(self):
        store = FeedStore()
        store.load()
        post = await store.publish("A", "0xAAAAAAAA")
        assert store.snapshot() == [post]
