"""Shared fixtures: a temporary SQLite store and a wired-up test client."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from typed_notes.app import create_app
from typed_notes.config import AppConfig, CosmosConfig, Settings, StoreConfig
from typed_notes.database.backends.sqlite import SqliteBackend
from typed_notes.database.repositories.articles import ArticleRepository


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        app=AppConfig(
            env="test",
            log_level="INFO",
            log_file="",
            port=4446,
            post_limit=30000,
            slow_request_ms=800,
        ),
        store=StoreConfig(backend="sqlite", sqlite_path=str(tmp_path / "articles.sqlite3")),
        cosmos=CosmosConfig(endpoint="", key="", database="typed-notes-test"),
    )


@pytest.fixture
async def sqlite_backend(tmp_path: Path) -> AsyncIterator[SqliteBackend]:
    backend = SqliteBackend(str(tmp_path / "store.sqlite3"))
    await backend.initialize()
    yield backend
    await backend.close()


@pytest.fixture
def repo(sqlite_backend: SqliteBackend) -> ArticleRepository:
    return ArticleRepository(sqlite_backend)


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """A client for the full app, with redirects left for the test to inspect."""
    with (
        patch("typed_notes.app.load_settings", return_value=settings),
        patch("typed_notes.app.configure_logging"),
    ):
        app = create_app()
    with TestClient(app, follow_redirects=False, raise_server_exceptions=False) as test_client:
        yield test_client
