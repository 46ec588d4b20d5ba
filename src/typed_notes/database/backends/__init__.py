"""Key-value backends the article repository can run on."""

from typed_notes.database.backends.base import KeyValueBackend
from typed_notes.database.backends.cosmos import CosmosBackend
from typed_notes.database.backends.sqlite import SqliteBackend

__all__ = ["CosmosBackend", "KeyValueBackend", "SqliteBackend"]
