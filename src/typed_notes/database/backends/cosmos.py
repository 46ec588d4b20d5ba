"""Cosmos DB backend — one container per collection, partitioned by /id."""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING, Any, cast

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient
from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError

if TYPE_CHECKING:
    from azure.cosmos.aio import ContainerProxy, DatabaseProxy

    from typed_notes.config import CosmosConfig

logger = logging.getLogger(__name__)

SEQUENCES_CONTAINER = "sequences"


class CosmosBackend:
    """Store records as ``{"id": key, "value": <base64>}`` documents.

    Sequences live in their own container as one counter document per
    collection, advanced with a server-side ``incr`` patch so concurrent
    allocators never observe the same value.
    """

    def __init__(self, config: CosmosConfig) -> None:
        self._config = config
        self._client: CosmosClient | None = None
        self._database: DatabaseProxy | None = None
        self._containers: dict[str, ContainerProxy] = {}

    async def initialize(self) -> None:
        """Create the client and make sure the database exists."""
        self._client = CosmosClient(self._config.endpoint, credential=self._config.key)
        self._database = await self._client.create_database_if_not_exists(self._config.database)
        logger.info(
            "Cosmos backend opened — endpoint=%s database=%s",
            self._config.endpoint,
            self._config.database,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.close()
            self._client = None
            self._database = None
        self._containers.clear()
        logger.info("Cosmos backend closed")

    async def _container(self, name: str) -> ContainerProxy:
        container = self._containers.get(name)
        if container is None:
            if self._database is None:
                raise RuntimeError("CosmosBackend not initialized, call initialize() first")
            container = await self._database.create_container_if_not_exists(
                id=name, partition_key=PartitionKey(path="/id")
            )
            self._containers[name] = container
        return container

    async def get(self, collection: str, key: str) -> bytes | None:
        container = await self._container(collection)
        try:
            item = cast(
                "dict[str, Any]",
                await container.read_item(item=key, partition_key=key),
            )
        except CosmosResourceNotFoundError:
            return None
        return base64.b64decode(item["value"])

    async def put(self, collection: str, key: str, value: bytes) -> None:
        container = await self._container(collection)
        await container.upsert_item(
            {"id": key, "value": base64.b64encode(value).decode("ascii")}
        )

    async def next_sequence(self, collection: str) -> int:
        container = await self._container(SEQUENCES_CONTAINER)
        try:
            return await self._increment(container, collection)
        except CosmosResourceNotFoundError:
            pass
        try:
            await container.create_item({"id": collection, "value": 1})
        except CosmosResourceExistsError:
            # Another allocator created the counter first; advance it instead.
            return await self._increment(container, collection)
        logger.info("Sequence created — collection=%s", collection)
        return 1

    @staticmethod
    async def _increment(container: ContainerProxy, name: str) -> int:
        item = cast(
            "dict[str, Any]",
            await container.patch_item(
                item=name,
                partition_key=name,
                patch_operations=[{"op": "incr", "path": "/value", "value": 1}],
            ),
        )
        return int(item["value"])

    async def count(self, collection: str) -> int:
        container = await self._container(collection)
        total = 0
        async for item in container.query_items("SELECT VALUE COUNT(1) FROM c"):
            total = cast("int", item)
        return total
