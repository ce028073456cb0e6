"""Ignore rules from .gitignore and the configured ignore paths.

Supported .gitignore subset:
  - Blank lines and lines starting with ``#`` are skipped.
  - A trailing ``/`` restricts the pattern to directories.
  - A leading ``/`` (or any inner ``/``) anchors the pattern to the root.
  - Other patterns match any path component by name.
  - ``!`` negation is not supported; such lines are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, List


@dataclass(frozen=True)
class IgnorePattern:
    pattern: str
    anchored: bool
    dir_only: bool

    @classmethod
    def parse(cls, line: str) -> "IgnorePattern":
        dir_only = line.endswith("/")
        line = line.rstrip("/")
        anchored = "/" in line
        return cls(pattern=line.lstrip("/"), anchored=anchored, dir_only=dir_only)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        if self.anchored:
            return fnmatch(rel_path, self.pattern)
        return fnmatch(rel_path.rsplit("/", 1)[-1], self.pattern)


@dataclass
class IgnoreRules:
    """Decides whether a relative path (file or directory) is excluded."""

    patterns: List[IgnorePattern] = field(default_factory=list)

    def add(self, lines: Iterable[str]) -> None:
        for raw in lines:
            line = raw.strip()
            if not line or line.startswith("#") or line.startswith("!"):
                continue
            self.patterns.append(IgnorePattern.parse(line))

    @classmethod
    def from_file(cls, path: Path) -> "IgnoreRules":
        """Load patterns from a .gitignore-style file. Missing file = no rules."""
        rules = cls()
        if path.is_file():
            rules.add(path.read_text(encoding="utf-8", errors="replace").splitlines())
        return rules

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        return any(p.matches(rel_path, is_dir) for p in self.patterns)
