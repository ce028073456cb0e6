"""Content fingerprints for change detection."""

from __future__ import annotations

import hashlib
from pathlib import Path


class DigestError(Exception):
    """Raised when a file cannot be fingerprinted (unreadable or binary)."""


def digest_of(data: bytes) -> str:
    """Return the SHA-256 hex digest of *data*."""
    return hashlib.sha256(data).hexdigest()


def hash_file(path: Path) -> str:
    """Fingerprint a text file. Binary content raises DigestError."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise DigestError(f"cannot read {path}: {exc.strerror or exc}") from exc
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DigestError(f"{path} is not UTF-8 text") from exc
    return digest_of(data)
