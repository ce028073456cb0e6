"""Analysis result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class ContentLimits:
    """How much of each file is sent to the Description Service."""

    excerpt_lines: int = 50
    excerpt_chars: int = 500
    max_deep_chars: int = 12000


@dataclass
class AnalysisOutcome:
    """Every submitted path ends up in exactly one of the two collections."""

    descriptions: Dict[str, str] = field(default_factory=dict)
    pending: List[str] = field(default_factory=list)
    service_calls: int = 0

    @property
    def total(self) -> int:
        return len(self.descriptions) + len(self.pending)
