"""Backend protocol — the narrow key-value contract the repository depends on."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueBackend(Protocol):
    """Keyed byte storage with a per-collection atomic sequence.

    ``put`` replaces the whole value and returns only once the write is
    durable. ``next_sequence`` never hands out the same value twice, even to
    concurrent callers; values start at 1.
    """

    async def initialize(self) -> None: ...

    async def close(self) -> None: ...

    async def get(self, collection: str, key: str) -> bytes | None: ...

    async def put(self, collection: str, key: str, value: bytes) -> None: ...

    async def next_sequence(self, collection: str) -> int: ...

    async def count(self, collection: str) -> int: ...
