"""Diff computation for incremental refresh.

Compares the digests of the currently listed files with the digest store.
The content digest is the only staleness signal: a file whose tier would be
different today but whose bytes are unchanged stays ``unchanged``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from cartographer.index.digest import DigestError, hash_file
from cartographer.index.models import DiffResult, DigestEntry

logger = logging.getLogger(__name__)

# Receives (relative path, error) for every file excluded from the universe.
UnreadableCallback = Callable[[str, DigestError], None]


def digest_files(
    root: Path,
    paths: Iterable[str],
    on_error: Optional[UnreadableCallback] = None,
) -> Tuple[Dict[str, str], List[str]]:
    """Fingerprint *paths* under *root*. Returns (digests, unreadable paths)."""
    digests: Dict[str, str] = {}
    unreadable: List[str] = []
    for rel in paths:
        try:
            digests[rel] = hash_file(root / rel)
        except DigestError as exc:
            logger.info("Excluding %s: %s", rel, exc)
            unreadable.append(rel)
            if on_error is not None:
                on_error(rel, exc)
    return digests, sorted(unreadable)


def diff_digests(
    current: Mapping[str, str],
    store: Mapping[str, DigestEntry],
) -> DiffResult:
    """Classify every path of *current* and *store*. Pure."""
    result = DiffResult(digests=dict(current))
    for path, digest in current.items():
        entry = store.get(path)
        if entry is None:
            result.added.add(path)
        elif entry.digest != digest:
            result.changed.add(path)
        else:
            result.unchanged.add(path)
    result.removed = set(store) - set(current)
    return result


def compute_diff(
    root: Path,
    paths: Iterable[str],
    store: Mapping[str, DigestEntry],
    on_error: Optional[UnreadableCallback] = None,
) -> DiffResult:
    """Fingerprint *paths* and diff them against *store*."""
    digests, unreadable = digest_files(root, paths, on_error)
    result = diff_digests(digests, store)
    # Stored paths that became unreadable end up in ``removed``.
    result.unreadable = unreadable
    return result
