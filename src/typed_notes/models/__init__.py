"""Data models for stored articles."""

from typed_notes.models.article import Article

__all__ = ["Article"]
