"""Digest store and diff engine."""

from cartographer.index.differ import compute_diff, diff_digests, digest_files
from cartographer.index.digest import DigestError, digest_of, hash_file
from cartographer.index.models import DiffResult, DigestEntry
from cartographer.index.store import DigestStore

__all__ = [
    "DiffResult",
    "DigestEntry",
    "DigestError",
    "DigestStore",
    "compute_diff",
    "diff_digests",
    "digest_files",
    "digest_of",
    "hash_file",
]
