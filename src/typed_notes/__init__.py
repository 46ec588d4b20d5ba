"""typed-notes — publish Markdown notes and edit them with a password."""

__version__ = "0.1.0"
