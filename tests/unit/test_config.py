"""
Unit tests for configuration loading.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from notary.config import KeysConfig, NotaryConfig, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for var in (
        "PORT",
        "NOTARY_PORT",
        "NOTARY_HUMANITY_THRESHOLD",
        "NOTARY_DATA_DIR",
        "NOTARY_LOG_LEVEL",
        "NOTARY_CORS_ORIGINS",
    ):
        monkeypatch.delenv(var, raising=False)


def test_defaults_without_file(tmp_path: Path):
    config = load_config(tmp_path / "missing.yaml")
    assert config.issuance.humanity_threshold == 0.8
    assert config.issuance.max_keystrokes is None
    assert config.keys.key_size == 2048
    assert config.server.port == 3000


def test_yaml_values(tmp_path: Path):
    path = tmp_path / "notary.yaml"
    path.write_text(
        "issuance:\n"
        "  humanity_threshold: 0.9\n"
        "  max_keystrokes: 10\n"
        "feed:\n"
        "  path: /var/lib/notary/feed.json\n"
    )
    config = load_config(path)
    assert config.issuance.humanity_threshold == 0.9
    assert config.issuance.max_keystrokes == 10
    assert config.feed.path == "/var/lib/notary/feed.json"


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("NOTARY_PORT", "8080")
    monkeypatch.setenv("NOTARY_HUMANITY_THRESHOLD", "0.75")
    monkeypatch.setenv("NOTARY_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("NOTARY_CORS_ORIGINS", "https://a.example, https://b.example")

    config = load_config(None)

    assert config.server.port == 8080
    assert config.issuance.humanity_threshold == 0.75
    assert config.feed.path == str(tmp_path / "feed.json")
    assert config.keys.private_key_path == str(tmp_path / "keys" / "private.pem")
    assert config.server.cors_origins == ["https://a.example", "https://b.example"]


def test_repository_default_yaml_matches_models():
    path = Path(__file__).resolve().parents[2] / "config" / "default.yaml"
    config = load_config(path)
    assert config == NotaryConfig()


def test_key_size_floor():
    with pytest.raises(ValidationError):
        KeysConfig(key_size=1024)
