"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    raw = _env(key)
    return int(raw) if raw else default


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: _env("LOG_FILE"))
    port: int = field(default_factory=lambda: _env_int("PORT", 4446))
    post_limit: int = field(default_factory=lambda: _env_int("POST_LIMIT", 30000))
    slow_request_ms: int = field(default_factory=lambda: _env_int("SLOW_REQUEST_MS", 800))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class StoreConfig:
    backend: str = field(default_factory=lambda: _env("STORE_BACKEND", "sqlite"))
    sqlite_path: str = field(default_factory=lambda: _env("SQLITE_PATH", "articles.sqlite3"))


@dataclass(frozen=True)
class CosmosConfig:
    endpoint: str = field(default_factory=lambda: _env("COSMOS_ENDPOINT"))
    key: str = field(default_factory=lambda: _env("COSMOS_KEY"))
    database: str = field(default_factory=lambda: _env("COSMOS_DATABASE", "typed-notes"))


@dataclass(frozen=True)
class Settings:
    app: AppConfig = field(default_factory=AppConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    cosmos: CosmosConfig = field(default_factory=CosmosConfig)


def load_settings() -> Settings:
    """Read ``.env`` (if present) into the environment and build settings."""
    load_dotenv()
    return Settings()
