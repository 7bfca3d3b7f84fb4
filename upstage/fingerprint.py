"""Content hashing used as upload metadata for change detection."""

from __future__ import annotations

import base64
import hashlib
from typing import BinaryIO

_CHUNK_SIZE = 1024 * 1024


def fingerprint(data: bytes) -> str:
    """Return the base64-encoded SHA-256 digest of ``data``."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"fingerprint() expects bytes, got {type(data).__name__}")
    return base64.b64encode(hashlib.sha256(data).digest()).decode("ascii")


def fingerprint_file(fileobj: BinaryIO) -> str:
    """Hash a binary stream in chunks.

    The stream is rewound to the position it had on entry, so the same handle
    can be passed on as a request body.
    """
    start = fileobj.tell()
    digest = hashlib.sha256()
    for chunk in iter(lambda: fileobj.read(_CHUNK_SIZE), b""):
        digest.update(chunk)
    fileobj.seek(start)
    return base64.b64encode(digest.digest()).decode("ascii")
