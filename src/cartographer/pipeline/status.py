"""Map freshness and cache health, for ``cartographer status``."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from cartographer.config.loader import resolve_cache_dir, resolve_output_path
from cartographer.config.schema import CartographerConfig
from cartographer.discovery.lister import list_files
from cartographer.git.adapter import GitError, count_commits_since
from cartographer.index.differ import compute_diff
from cartographer.index.models import DiffResult
from cartographer.index.store import DigestStore


@dataclass
class StatusReport:
    output_path: Path
    map_exists: bool
    generated_at: Optional[datetime] = None
    commits_since: Optional[int] = None
    cached_files: int = 0
    current_files: int = 0
    diff: Optional[DiffResult] = None  # None when the cache is empty
    map_text: str = ""

    @property
    def map_lines(self) -> int:
        return len(self.map_text.split("\n")) if self.map_text else 0


def collect_status(root: Path, config: CartographerConfig) -> StatusReport:
    """Inspect the map and cache without changing either."""
    output_path = resolve_output_path(root, config)
    if not output_path.is_file():
        return StatusReport(output_path=output_path, map_exists=False)

    generated_at = datetime.fromtimestamp(output_path.stat().st_mtime, tz=timezone.utc)
    report = StatusReport(
        output_path=output_path,
        map_exists=True,
        generated_at=generated_at,
        map_text=output_path.read_text(encoding="utf-8", errors="replace"),
    )
    try:
        report.commits_since = count_commits_since(root, generated_at)
    except GitError:
        report.commits_since = None

    cache = DigestStore(resolve_cache_dir(root, config)).load()
    report.cached_files = len(cache)
    if cache:
        paths = [r.path for r in list_files(root, config)]
        report.diff = compute_diff(root, paths, cache)
        report.current_files = len(report.diff.digests)
    return report
