"""Pre-flight check for the configured storage backend."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import httpx

if TYPE_CHECKING:
    from typed_notes.config import Settings

logger = logging.getLogger(__name__)


async def check_backend(settings: Settings) -> bool:
    """Verify the store is reachable before serving. Return False if it is not.

    Only a local Cosmos DB emulator (a non-HTTPS endpoint) is probed; SQLite
    and hosted Cosmos accounts need no pre-flight.
    """
    if settings.store.backend != "cosmos":
        return True

    cosmos_url = settings.cosmos.endpoint
    if not cosmos_url:
        logger.error("COSMOS_ENDPOINT is not set, add it to .env or use STORE_BACKEND=sqlite")
        return False
    if cosmos_url.startswith("https://"):
        return True

    async with httpx.AsyncClient(timeout=3) as client:
        try:
            await client.get(f"{cosmos_url.rstrip('/')}/")
        except httpx.ConnectError:
            parsed = urlparse(cosmos_url)
            logger.error("Cosmos DB emulator is not running at %s", parsed.netloc)
            return False
    return True
