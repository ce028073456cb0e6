"""Persisted path -> DigestEntry mapping (``hashes.json``).

The store is only ever replaced as a whole: ``save`` writes a temporary file
beside the target and renames it over ``hashes.json``, so readers see either
the previous state or the new one. Anything ``load`` cannot make sense of is
treated as "no prior state".
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Mapping

from cartographer.index.models import DigestEntry

logger = logging.getLogger(__name__)

STORE_FILENAME = "hashes.json"
STORE_VERSION = 1


class DigestStore:
    """Reads and atomically rewrites the digest store inside *cache_dir*."""

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = cache_dir

    @property
    def path(self) -> Path:
        return self.cache_dir / STORE_FILENAME

    def load(self) -> Dict[str, DigestEntry]:
        """Return the stored entries, or an empty mapping if none are usable."""
        if not self.path.is_file():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable digest store %s: %s", self.path, exc)
            return {}

        if not isinstance(raw, dict) or raw.get("version") != STORE_VERSION:
            logger.warning("Ignoring digest store %s with unknown format", self.path)
            return {}
        files = raw.get("files")
        if not isinstance(files, dict):
            logger.warning("Ignoring digest store %s without a files table", self.path)
            return {}

        entries: Dict[str, DigestEntry] = {}
        try:
            for path, data in files.items():
                if not isinstance(data, dict):
                    raise ValueError(f"entry for {path} is not an object")
                entries[path] = DigestEntry.from_dict(data)
        except (KeyError, ValueError) as exc:
            logger.warning("Ignoring corrupt digest store %s: %s", self.path, exc)
            return {}
        return entries

    def save(self, entries: Mapping[str, DigestEntry]) -> None:
        """Replace the persisted store with *entries*."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": STORE_VERSION,
            "files": {path: entries[path].to_dict() for path in sorted(entries)},
        }
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

        fd, tmp_name = tempfile.mkstemp(
            prefix=".hashes-", suffix=".tmp", dir=self.cache_dir
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        logger.debug("Saved %d digest entries to %s", len(entries), self.path)
