"""
Humanity Notary — Configuration System

All configuration is Pydantic-validated and loaded from:
1. default.yaml (defaults)
2. Environment variables (overrides)

Every tunable parameter in the service lives here.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ─── Sub-configs ──────────────────────────────────────────────────


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    # The capture client is served from arbitrary origins.
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class KeysConfig(BaseModel):
    private_key_path: str = "data/keys/private.pem"
    public_key_path: str = "data/keys/public.pem"
    key_size: int = 2048

    @field_validator("key_size")
    @classmethod
    def _min_key_size(cls, value: int) -> int:
        if value < 2048:
            raise ValueError("key_size must be at least 2048 bits")
        return value


class IssuanceConfig(BaseModel):
    humanity_threshold: float = 0.8
    # Only the first N flight times seed the signer identity. None = all.
    max_keystrokes: int | None = None

    @field_validator("max_keystrokes")
    @classmethod
    def _positive_keystrokes(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("max_keystrokes must be positive")
        return value


class FeedConfig(BaseModel):
    path: str = "data/feed.json"
    timestamp_format: str = "%I:%M:%S %p"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "console"  # "console" | "json"


class NotaryConfig(BaseSettings):
    """
    Root configuration. Loads from YAML, overridable by env vars.
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTARY_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    keys: KeysConfig = Field(default_factory=KeysConfig)
    issuance: IssuanceConfig = Field(default_factory=IssuanceConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str | Path | None = None) -> NotaryConfig:
    """
    Load configuration from YAML file, then apply environment variable overrides.
    """
    raw: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    if port := os.environ.get("NOTARY_PORT") or os.environ.get("PORT"):
        raw.setdefault("server", {})["port"] = int(port)
    if threshold := os.environ.get("NOTARY_HUMANITY_THRESHOLD"):
        raw.setdefault("issuance", {})["humanity_threshold"] = float(threshold)
    if data_dir := os.environ.get("NOTARY_DATA_DIR"):
        base = Path(data_dir)
        raw.setdefault("keys", {})["private_key_path"] = str(base / "keys" / "private.pem")
        raw.setdefault("keys", {})["public_key_path"] = str(base / "keys" / "public.pem")
        raw.setdefault("feed", {})["path"] = str(base / "feed.json")
    if log_level := os.environ.get("NOTARY_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level
    if origins := os.environ.get("NOTARY_CORS_ORIGINS"):
        raw.setdefault("server", {})["cors_origins"] = [
            o.strip() for o in origins.split(",") if o.strip()
        ]

    return NotaryConfig(**raw)
