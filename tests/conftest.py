"""
Shared fixtures.

RSA key generation is slow, so one keypair is generated per session and
written into each test's temp directory as needed.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from notary.systems.feed.store import FeedStore
from notary.systems.identity.keys import Keypair, KeyProvider, write_keypair


@pytest.fixture(scope="session")
def rsa_keypair() -> Keypair:
    return Keypair.generate()


@pytest.fixture(scope="session")
def other_keypair() -> Keypair:
    return Keypair.generate()


@pytest.fixture
def key_paths(tmp_path: Path, rsa_keypair: Keypair) -> tuple[Path, Path]:
    private_path = tmp_path / "keys" / "private.pem"
    public_path = tmp_path / "keys" / "public.pem"
    write_keypair(rsa_keypair, private_path, public_path)
    return private_path, public_path


@pytest.fixture
def key_provider(key_paths: tuple[Path, Path]) -> KeyProvider:
    provider = KeyProvider(*key_paths)
    provider.load_or_create()
    return provider


@pytest.fixture
def feed_store(tmp_path: Path) -> FeedStore:
    store = FeedStore(tmp_path / "feed.json")
    store.load()
    return store
