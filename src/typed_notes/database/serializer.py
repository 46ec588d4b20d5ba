"""Persisted article record layout.

The stored body is a tagged variant, either raw UTF-8 bytes or a gzip
stream. The tag never leaves this module and the repository: records are
decoded into :class:`~typed_notes.models.Article` immediately after load.
"""

from __future__ import annotations

import base64
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_serializer, field_validator
from pydantic import ValidationError as PydanticValidationError

from typed_notes import codec
from typed_notes.errors import StorageFaultError
from typed_notes.models.article import Article


class _EncodedBody(BaseModel):
    data: bytes

    @field_validator("data", mode="before")
    @classmethod
    def _from_base64(cls, value: object) -> object:
        # JSON carries the bytes as base64 text; in-process callers pass bytes.
        if isinstance(value, str):
            return base64.b64decode(value, validate=True)
        return value

    @field_serializer("data")
    def _to_base64(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")


class RawBody(_EncodedBody):
    encoding: Literal["raw"] = "raw"


class CompressedBody(_EncodedBody):
    encoding: Literal["gzip"] = "gzip"


StoredBody = Annotated[RawBody | CompressedBody, Field(discriminator="encoding")]


class ArticleRecord(BaseModel):
    """One stored article. The ID is the record key and is not repeated here."""

    password_digest: str
    salt: str
    revision: int = Field(ge=0)
    body: StoredBody

    @property
    def is_compressed(self) -> bool:
        return isinstance(self.body, CompressedBody)


def encode_body(text: str) -> RawBody | CompressedBody:
    """Run the codec and wrap its output in the matching variant."""
    data, compressed = codec.encode(text)
    if compressed:
        return CompressedBody(data=data)
    return RawBody(data=data)


def dumps(record: ArticleRecord) -> bytes:
    return record.model_dump_json().encode("utf-8")


def loads(value: bytes) -> ArticleRecord:
    """Parse a stored record, raising ``StorageFaultError`` when it is malformed."""
    try:
        return ArticleRecord.model_validate_json(value)
    except PydanticValidationError as exc:
        raise StorageFaultError(f"malformed article record: {exc}") from exc


def to_article(article_id: int, record: ArticleRecord) -> Article:
    """Decode a record into an article, reversing any compression."""
    return Article(
        id=article_id,
        password_digest=record.password_digest,
        salt=record.salt,
        body=codec.decode(record.body.data, record.is_compressed),
        revision=record.revision,
    )
