"""Credential guard — salted SHA-512 digests of edit passwords."""

from __future__ import annotations

import hashlib
import hmac
import uuid


def new_salt() -> str:
    """Generate a per-article salt."""
    return str(uuid.uuid4())


def digest(password: str, salt: str) -> str:
    """Return the hex digest of ``password + salt``.

    An empty password yields the empty string, which marks an article that
    has no edit password at all.
    """
    if password == "":
        return ""
    return hashlib.sha512((password + salt).encode("utf-8")).hexdigest()


def verify(password: str, salt: str, stored_digest: str) -> bool:
    """Check a supplied password against the stored digest."""
    if not stored_digest:
        return False
    return hmac.compare_digest(digest(password, salt), stored_digest)
