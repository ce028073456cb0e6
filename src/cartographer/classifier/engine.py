"""Tier classification — decides how each file gets its description.

Evaluation order is fixed:
  1. key entry points, then deep patterns      -> DEEP (wins over skip)
  2. skip patterns, then the description table -> SKIP with a static description
  3. anything else                             -> BATCH
"""

from __future__ import annotations

import math
import posixpath
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from cartographer.discovery.models import FileRecord
from cartographer.rules.models import Tier, TierRules, glob_match

FALLBACK_SKIP_DESCRIPTION = "Configuration file"

BATCH_CALL_COST = 0.003
DEEP_CALL_COST = 0.01


@dataclass(frozen=True)
class ClassifiedFile:
    """A FileRecord with its tier; ``auto_description`` is set only for SKIP."""

    record: FileRecord
    tier: Tier
    auto_description: Optional[str] = None

    @property
    def path(self) -> str:
        return self.record.path


def matches_pattern(path: str, pattern: str) -> bool:
    """Match a full path (pattern contains ``/``) or the basename."""
    if "/" in pattern:
        return glob_match(path, pattern)
    return glob_match(posixpath.basename(path), pattern)


def _matches_entry_point(path: str, pattern: str) -> bool:
    if matches_pattern(path, pattern):
        return True
    # A bare module name such as "main" names src/main.ts as well.
    if "/" in pattern or "." in pattern or any(c in pattern for c in "*?["):
        return False
    stem = posixpath.splitext(posixpath.basename(path))[0]
    return stem.lower() == pattern.lower()


def is_deep(path: str, rules: TierRules) -> bool:
    if any(_matches_entry_point(path, p) for p in rules.key_entry_points):
        return True
    return any(matches_pattern(path, p) for p in rules.deep_patterns)


def skip_description(path: str, rules: TierRules) -> Optional[str]:
    """Return the static description if *path* belongs to the SKIP tier."""
    basename = posixpath.basename(path)
    if any(glob_match(basename, p) for p in rules.skip_patterns):
        return rules.describe(basename) or FALLBACK_SKIP_DESCRIPTION
    return rules.describe(basename)


def classify(record: FileRecord, rules: TierRules) -> ClassifiedFile:
    if is_deep(record.path, rules):
        return ClassifiedFile(record, Tier.DEEP)
    description = skip_description(record.path, rules)
    if description is not None:
        return ClassifiedFile(record, Tier.SKIP, auto_description=description)
    return ClassifiedFile(record, Tier.BATCH)


def classify_files(records: Iterable[FileRecord], rules: TierRules) -> List[ClassifiedFile]:
    return [classify(r, rules) for r in records]


def tier_summary(files: Iterable[ClassifiedFile]) -> Dict[str, int]:
    """Count files per tier, plus ``total``."""
    counts = {tier.value: 0 for tier in Tier}
    total = 0
    for f in files:
        counts[f.tier.value] += 1
        total += 1
    counts["total"] = total
    return counts


@dataclass(frozen=True)
class CostEstimate:
    batch_calls: int
    deep_calls: int
    estimated_cost: str


def estimate_cost(files: Iterable[ClassifiedFile], batch_size: int) -> CostEstimate:
    """Rough request count and price for analysing *files*."""
    summary = tier_summary(files)
    batch_calls = math.ceil(summary[Tier.BATCH.value] / batch_size)
    deep_calls = summary[Tier.DEEP.value]
    cost = batch_calls * BATCH_CALL_COST + deep_calls * DEEP_CALL_COST
    return CostEstimate(batch_calls, deep_calls, f"${cost:.2f}")
