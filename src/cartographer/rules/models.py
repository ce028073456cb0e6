"""Tier and description-rule data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fnmatch import fnmatchcase
from typing import List, Optional


class Tier(str, Enum):
    SKIP = "auto-skip"
    BATCH = "batch"
    DEEP = "deep"


def glob_match(name: str, pattern: str) -> bool:
    """Case-insensitive glob match (exact name, ``*.ext`` or ``*``/``?``)."""
    return fnmatchcase(name.lower(), pattern.lower())


@dataclass(frozen=True)
class DescriptionRule:
    """A static description for files whose basename matches ``pattern``."""

    pattern: str
    description: str
    source: str = "builtin"  # 'builtin' | path of the custom rule file

    def matches(self, basename: str) -> bool:
        return glob_match(basename, self.pattern)


@dataclass(frozen=True)
class TierRules:
    """Everything the classifier needs, passed in explicitly.

    ``descriptions`` is ordered: the first matching rule wins.
    """

    key_entry_points: List[str] = field(default_factory=list)
    deep_patterns: List[str] = field(default_factory=list)
    skip_patterns: List[str] = field(default_factory=list)
    descriptions: List[DescriptionRule] = field(default_factory=list)

    def describe(self, basename: str) -> Optional[str]:
        for rule in self.descriptions:
            if rule.matches(basename):
                return rule.description
        return None
