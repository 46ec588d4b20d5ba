"""Repository for the articles collection (keyed by decimal ID)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from typed_notes import credentials
from typed_notes.database import serializer
from typed_notes.errors import (
    ArticleNotFoundError,
    AuthorizationError,
    StorageFaultError,
    TypedNotesError,
)

if TYPE_CHECKING:
    from typed_notes.database.backends.base import KeyValueBackend
    from typed_notes.models.article import Article

logger = logging.getLogger(__name__)


class ArticleRepository:
    """Create, read and update articles on top of a key-value backend.

    ``update`` is a read-modify-write without a per-article lock. Two edits
    racing on the same ID can both succeed; the later write wins.
    """

    collection_name = "articles"

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend

    async def create(self, body: str, password: str) -> int:
        """Store a new article and return its ID.

        The ID is allocated before the record is written; a failed write
        leaves a gap in the sequence.
        """
        article_id = await self._allocate_id()
        salt = credentials.new_salt()
        record = serializer.ArticleRecord(
            password_digest=credentials.digest(password, salt),
            salt=salt,
            revision=0,
            body=serializer.encode_body(body),
        )
        await self._write(article_id, record)
        logger.info(
            "Article created — id=%d compressed=%s editable=%s",
            article_id,
            record.is_compressed,
            bool(record.password_digest),
        )
        return article_id

    async def get(self, article_id: int) -> Article:
        """Fetch and decode an article. Raises ``ArticleNotFoundError``."""
        record = await self._read(article_id)
        return serializer.to_article(article_id, record)

    async def update(self, article_id: int, password: str, body: str) -> int:
        """Replace an article's body and return the new revision.

        Raises ``ArticleNotFoundError`` or ``AuthorizationError``.
        """
        record = await self._read(article_id)
        if not credentials.verify(password, record.salt, record.password_digest):
            logger.info("Article edit rejected — id=%d", article_id)
            raise AuthorizationError("wrong password")
        updated = record.model_copy(
            update={
                "body": serializer.encode_body(body),
                "revision": record.revision + 1,
            }
        )
        await self._write(article_id, updated)
        logger.info(
            "Article updated — id=%d revision=%d compressed=%s",
            article_id,
            updated.revision,
            updated.is_compressed,
        )
        return updated.revision

    async def count(self) -> int:
        """Return the number of stored articles."""
        try:
            return await self._backend.count(self.collection_name)
        except Exception as exc:
            raise StorageFaultError(f"count failed: {exc}") from exc

    async def _allocate_id(self) -> int:
        try:
            return await self._backend.next_sequence(self.collection_name)
        except Exception as exc:
            raise StorageFaultError(f"id allocation failed: {exc}") from exc

    async def _read(self, article_id: int) -> serializer.ArticleRecord:
        try:
            value = await self._backend.get(self.collection_name, str(article_id))
        except Exception as exc:
            raise StorageFaultError(f"read of article {article_id} failed: {exc}") from exc
        if value is None:
            raise ArticleNotFoundError(article_id)
        return serializer.loads(value)

    async def _write(self, article_id: int, record: serializer.ArticleRecord) -> None:
        try:
            await self._backend.put(
                self.collection_name, str(article_id), serializer.dumps(record)
            )
        except TypedNotesError:
            raise
        except Exception as exc:
            raise StorageFaultError(f"write of article {article_id} failed: {exc}") from exc
