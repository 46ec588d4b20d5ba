"""Persistence layer: key-value backends, record layout and repositories."""
