"""Data models for the digest store and diff engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set


@dataclass(frozen=True)
class DigestEntry:
    """Last known state of one file, as persisted between runs."""

    digest: str
    tier: str
    description: Optional[str] = None
    last_analyzed: Optional[str] = None  # ISO-8601, UTC

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "digest": self.digest,
            "tier": self.tier,
            "description": self.description,
            "last_analyzed": self.last_analyzed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "DigestEntry":
        digest = data["digest"]
        tier = data["tier"]
        description = data.get("description")
        last_analyzed = data.get("last_analyzed")
        if not isinstance(digest, str) or not isinstance(tier, str):
            raise ValueError("digest and tier must be strings")
        if description is not None and not isinstance(description, str):
            raise ValueError("description must be a string")
        if last_analyzed is not None and not isinstance(last_analyzed, str):
            raise ValueError("last_analyzed must be a string")
        return cls(
            digest=digest,
            tier=tier,
            description=description,
            last_analyzed=last_analyzed,
        )


@dataclass
class DiffResult:
    """Classification of every known path against the stored digests.

    ``added``, ``changed`` and ``unchanged`` cover the current (readable)
    universe; ``removed`` holds stored paths that are no longer listed.
    """

    added: Set[str] = field(default_factory=set)
    changed: Set[str] = field(default_factory=set)
    removed: Set[str] = field(default_factory=set)
    unchanged: Set[str] = field(default_factory=set)
    digests: Dict[str, str] = field(default_factory=dict)
    unreadable: List[str] = field(default_factory=list)

    @property
    def to_analyze(self) -> Set[str]:
        return self.added | self.changed

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.changed or self.removed)

    @property
    def summary(self) -> str:
        return (
            f"{len(self.added)} added, {len(self.changed)} changed, "
            f"{len(self.removed)} removed ({len(self.unchanged)} unchanged)"
        )
