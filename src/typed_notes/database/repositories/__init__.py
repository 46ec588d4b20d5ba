"""Repository modules for each stored collection."""

from typed_notes.database.repositories.articles import ArticleRepository

__all__ = ["ArticleRepository"]
