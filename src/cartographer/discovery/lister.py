"""File discovery — walk the project tree and produce FileRecords."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from cartographer.config.loader import relative_to_root, resolve_cache_dir, resolve_output_path
from cartographer.config.schema import CartographerConfig
from cartographer.discovery.ignore import IgnoreRules
from cartographer.discovery.models import FileRecord

logger = logging.getLogger(__name__)

BINARY_EXTENSIONS = frozenset({
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".svg", ".webp", ".avif",
    ".mp3", ".mp4", ".wav", ".avi", ".mov", ".webm", ".ogg",
    ".pdf", ".zip", ".tar", ".gz", ".bz2", ".7z", ".rar",
    ".exe", ".dll", ".so", ".dylib", ".bin", ".dat",
    ".db", ".sqlite", ".sqlite3",
    ".woff", ".woff2", ".ttf", ".otf", ".eot",
    ".class", ".pyc", ".pyo", ".o", ".obj", ".a", ".lib",
    ".ds_store", ".lock",
})


def is_binary_extension(name: str) -> bool:
    lower = name.lower()
    if lower == ".ds_store":
        return True
    return os.path.splitext(lower)[1] in BINARY_EXTENSIONS


def build_ignore_rules(root: Path, config: CartographerConfig) -> IgnoreRules:
    rules = IgnoreRules.from_file(root / ".gitignore")
    rules.add(config.discovery.ignore_paths)
    rules.add([".git/"])
    # Our own outputs are never described, whatever ignore_paths says.
    cache = relative_to_root(root, resolve_cache_dir(root, config))
    if cache is not None:
        rules.add([f"/{cache}/"])
    output = relative_to_root(root, resolve_output_path(root, config))
    if output is not None:
        rules.add([f"/{output}"])
    return rules


def list_files(root: Path, config: CartographerConfig) -> List[FileRecord]:
    """Return every non-ignored, non-binary file under *root*, sorted by path."""
    rules = build_ignore_rules(root, config)
    records: List[FileRecord] = []

    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"

        # Prune in place so os.walk never descends into ignored directories.
        dirnames[:] = sorted(
            d for d in dirnames if not rules.is_ignored(f"{prefix}{d}", is_dir=True)
        )

        for name in filenames:
            rel = f"{prefix}{name}"
            if rules.is_ignored(rel) or is_binary_extension(name):
                continue
            full = Path(dirpath) / name
            try:
                size = full.stat().st_size
            except OSError as exc:
                logger.debug("Skipping %s: %s", rel, exc)
                continue
            records.append(
                FileRecord(path=rel, extension=os.path.splitext(name)[1], size_bytes=size)
            )

    records.sort(key=lambda r: r.path)
    return records
