"""Exception hierarchy shared by the store and the HTTP layer."""

from __future__ import annotations


class TypedNotesError(Exception):
    """Base class for all application errors."""


class ArticleNotFoundError(TypedNotesError):
    """No article is stored under the requested ID."""

    def __init__(self, article_id: int) -> None:
        super().__init__(f"article {article_id} not found")
        self.article_id = article_id


class AuthorizationError(TypedNotesError):
    """The supplied edit password does not unlock the article."""


class StorageFaultError(TypedNotesError):
    """The backing store failed to read, write or decode a record."""


class ValidationError(TypedNotesError):
    """A request was rejected before reaching the store."""


class InvalidArticleIdError(ValidationError):
    """The path segment is not a valid article ID."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"invalid article id {raw!r}")
        self.raw = raw


class PayloadTooLargeError(ValidationError):
    """The request body exceeds the configured ceiling."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"request body exceeds {limit} bytes")
        self.limit = limit


class MissingFieldError(ValidationError):
    """A required form field was not submitted."""

    def __init__(self, field: str) -> None:
        super().__init__(f"missing form field {field!r}")
        self.field = field
