"""Tests for the Cosmos DB key-value backend."""

import base64
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError

from typed_notes.config import CosmosConfig
from typed_notes.database.backends.cosmos import SEQUENCES_CONTAINER, CosmosBackend


@pytest.mark.unit
class TestCosmosBackend:
    """Test the Cosmos Backend."""

    @pytest.fixture
    def container(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    async def backend(self, container: AsyncMock) -> CosmosBackend:
        """Create an initialized backend over a mocked client."""
        config = CosmosConfig(endpoint="https://cosmos.example.com", key="k", database="db")
        database = MagicMock()
        database.create_container_if_not_exists = AsyncMock(return_value=container)
        with patch("typed_notes.database.backends.cosmos.CosmosClient") as mock_client_cls:
            client = mock_client_cls.return_value
            client.create_database_if_not_exists = AsyncMock(return_value=database)
            client.close = AsyncMock()
            backend = CosmosBackend(config)
            await backend.initialize()
        mock_client_cls.assert_called_once_with("https://cosmos.example.com", credential="k")
        client.create_database_if_not_exists.assert_awaited_once_with("db")
        return backend

    async def test_get_decodes_value(self, backend: CosmosBackend, container: AsyncMock) -> None:
        """Verify get reads the item by key and decodes its base64 value."""
        container.read_item.return_value = {"id": "1", "value": base64.b64encode(b"abc").decode()}

        result = await backend.get("articles", "1")

        assert result == b"abc"
        container.read_item.assert_awaited_once_with(item="1", partition_key="1")

    async def test_get_missing_returns_none(self, backend: CosmosBackend, container: AsyncMock) -> None:
        """Verify a missing document maps to None."""
        container.read_item.side_effect = CosmosResourceNotFoundError(
            status_code=404, message="Not found"
        )

        assert await backend.get("articles", "9") is None

    async def test_put_upserts_full_document(self, backend: CosmosBackend, container: AsyncMock) -> None:
        """Verify put replaces the whole document."""
        await backend.put("articles", "3", b"\x01\x02")

        container.upsert_item.assert_awaited_once_with(
            {"id": "3", "value": base64.b64encode(b"\x01\x02").decode()}
        )

    async def test_containers_are_created_once(self, backend: CosmosBackend, container: AsyncMock) -> None:
        """Verify container proxies are cached per collection."""
        container.read_item.return_value = {"id": "1", "value": ""}
        await backend.get("articles", "1")
        await backend.get("articles", "1")

        create = backend._database.create_container_if_not_exists  # noqa: SLF001
        assert create.await_count == 1
        assert create.call_args.kwargs["id"] == "articles"

    async def test_next_sequence_patches_counter(self, backend: CosmosBackend, container: AsyncMock) -> None:
        """Verify the counter is advanced with an atomic incr patch."""
        container.patch_item.return_value = {"id": "articles", "value": 42}

        assert await backend.next_sequence("articles") == 42

        kwargs = container.patch_item.call_args.kwargs
        assert kwargs["item"] == "articles"
        assert kwargs["partition_key"] == "articles"
        assert kwargs["patch_operations"] == [{"op": "incr", "path": "/value", "value": 1}]
        create = backend._database.create_container_if_not_exists  # noqa: SLF001
        assert create.call_args.kwargs["id"] == SEQUENCES_CONTAINER

    async def test_next_sequence_creates_missing_counter(
        self, backend: CosmosBackend, container: AsyncMock
    ) -> None:
        """Verify the first allocation creates the counter at 1."""
        container.patch_item.side_effect = CosmosResourceNotFoundError(
            status_code=404, message="Not found"
        )

        assert await backend.next_sequence("articles") == 1
        container.create_item.assert_awaited_once_with({"id": "articles", "value": 1})

    async def test_next_sequence_falls_back_to_patch_on_create_conflict(
        self, backend: CosmosBackend, container: AsyncMock
    ) -> None:
        """Verify a lost create race still yields a fresh value."""
        container.patch_item.side_effect = [
            CosmosResourceNotFoundError(status_code=404, message="Not found"),
            {"id": "articles", "value": 2},
        ]
        container.create_item.side_effect = CosmosResourceExistsError(
            status_code=409, message="Conflict"
        )

        assert await backend.next_sequence("articles") == 2
        assert container.patch_item.await_count == 2

    async def test_count_reads_aggregate(self, backend: CosmosBackend, container: AsyncMock) -> None:
        """Verify count returns the COUNT(1) aggregate."""

        async def results():
            yield 5

        container.query_items = MagicMock(return_value=results())

        assert await backend.count("articles") == 5
        assert "COUNT(1)" in container.query_items.call_args[0][0]

    async def test_close_closes_client(self, backend: CosmosBackend) -> None:
        """Verify close releases the client."""
        client = backend._client  # noqa: SLF001
        await backend.close()
        client.close.assert_awaited_once()
        assert backend._client is None  # noqa: SLF001
