"""Content codec — size-triggered gzip compression of article bodies."""

from __future__ import annotations

import gzip
import zlib

from typed_notes.errors import StorageFaultError

COMPRESSION_THRESHOLD = 200
COMPRESSION_LEVEL = 9


def encode(text: str) -> tuple[bytes, bool]:
    """Encode a body for storage, compressing it at or above the threshold.

    Returns the stored bytes and whether they are compressed.
    """
    raw = text.encode("utf-8")
    if len(raw) < COMPRESSION_THRESHOLD:
        return raw, False
    return gzip.compress(raw, compresslevel=COMPRESSION_LEVEL), True


def decode(data: bytes, is_compressed: bool) -> str:
    """Reverse :func:`encode`.

    Raises ``StorageFaultError`` when the stored bytes cannot be decoded.
    """
    try:
        raw = gzip.decompress(data) if is_compressed else data
        return raw.decode("utf-8")
    except (OSError, EOFError, zlib.error, UnicodeDecodeError) as exc:
        raise StorageFaultError(f"corrupt article body: {exc}") from exc
