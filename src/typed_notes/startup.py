"""Backend construction for the web process."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from typed_notes.database.backends import CosmosBackend, SqliteBackend

if TYPE_CHECKING:
    from typed_notes.config import Settings
    from typed_notes.database.backends import KeyValueBackend

logger = logging.getLogger(__name__)


def create_backend(settings: Settings) -> KeyValueBackend:
    """Build the backend selected by ``STORE_BACKEND``."""
    kind = settings.store.backend
    if kind == "sqlite":
        return SqliteBackend(settings.store.sqlite_path)
    if kind == "cosmos":
        return CosmosBackend(settings.cosmos)
    raise ValueError(f"unknown STORE_BACKEND {kind!r}, expected 'sqlite' or 'cosmos'")


async def init_backend(settings: Settings) -> KeyValueBackend:
    """Create and open the process-wide backend."""
    backend = create_backend(settings)
    try:
        await backend.initialize()
    except Exception as exc:
        raise ConnectionError(f"Could not open {settings.store.backend} store: {exc}") from exc
    return backend
