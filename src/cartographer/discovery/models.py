"""File listing models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FileRecord:
    """A candidate file, keyed by its repo-relative POSIX path."""

    path: str
    extension: str
    size_bytes: int
