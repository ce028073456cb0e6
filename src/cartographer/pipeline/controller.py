"""Pipeline controller — one procedure for full and incremental runs.

Stages run in order: list -> diff -> classify -> analyze -> merge -> persist.
Nothing is written until the very end, and then the report first and the
digest store second, each exactly once. Files that failed analysis are left
out of the new store so the next run sees them as ``added`` and retries them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from cartographer.analysis.free import describe_all
from cartographer.analysis.models import AnalysisOutcome, ContentLimits
from cartographer.analysis.orchestrator import ProgressCallback, analyze
from cartographer.classifier.engine import (
    FALLBACK_SKIP_DESCRIPTION,
    ClassifiedFile,
    CostEstimate,
    classify_files,
    estimate_cost,
    tier_summary,
)
from cartographer.config.loader import resolve_cache_dir, resolve_output_path
from cartographer.config.schema import CartographerConfig
from cartographer.discovery.lister import list_files
from cartographer.index.differ import UnreadableCallback, compute_diff
from cartographer.index.models import DiffResult, DigestEntry
from cartographer.index.store import DigestStore
from cartographer.output.markdown import write_map
from cartographer.rules.models import Tier, TierRules
from cartographer.rules.registry import build_registry
from cartographer.service.base import DescriptionService

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[], DescriptionService]


class RunMode(str, Enum):
    FULL = "full"
    INCREMENTAL = "incremental"


@dataclass
class RunResult:
    """What a run published (or, for dry runs and no-ops, would publish)."""

    mode: RunMode
    diff: DiffResult
    descriptions: Dict[str, str] = field(default_factory=dict)
    pending: List[str] = field(default_factory=list)
    tiers: Dict[str, int] = field(default_factory=dict)
    estimate: Optional[CostEstimate] = None
    service_calls: int = 0
    analyzed: int = 0
    written: bool = False
    output_path: Optional[Path] = None

    @property
    def paths(self) -> List[str]:
        return sorted(self.descriptions)

    @property
    def is_up_to_date(self) -> bool:
        return self.mode is RunMode.INCREMENTAL and self.analyzed == 0 and not self.diff.removed


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _free_outcome(files: List[ClassifiedFile]) -> AnalysisOutcome:
    outcome = AnalysisOutcome()
    for f in files:
        if f.tier is Tier.SKIP:
            outcome.descriptions[f.path] = f.auto_description or FALLBACK_SKIP_DESCRIPTION
    outcome.descriptions.update(
        describe_all(f.record for f in files if f.tier is not Tier.SKIP)
    )
    return outcome


def run_pipeline(
    root: Path,
    config: CartographerConfig,
    *,
    service_factory: ServiceFactory,
    free: bool = False,
    dry_run: bool = False,
    full: bool = False,
    rules: Optional[TierRules] = None,
    on_progress: Optional[ProgressCallback] = None,
    on_unreadable: Optional[UnreadableCallback] = None,
    clock: Callable[[], datetime] = _utc_now,
) -> RunResult:
    """Bring the context map and digest store up to date for *root*."""
    records = {r.path: r for r in list_files(root, config)}
    store = DigestStore(resolve_cache_dir(root, config))
    previous = {} if full else store.load()
    mode = RunMode.INCREMENTAL if previous else RunMode.FULL
    output_path = resolve_output_path(root, config)

    diff = compute_diff(root, records, previous, on_unreadable)
    logger.info("%s run: %s", mode.value, diff.summary)

    # Entries without a description predate pending-file handling; retry them.
    undescribed = {p for p in diff.unchanged if not previous[p].description}
    to_analyze = sorted(diff.to_analyze | undescribed)

    if rules is None:
        rules = build_registry(root).tier_rules(config)
    classified = classify_files([records[p] for p in to_analyze], rules)

    result = RunResult(
        mode=mode,
        diff=diff,
        tiers=tier_summary(classified),
        estimate=estimate_cost(classified, config.tiers.batch_size),
        analyzed=len(classified),
        output_path=output_path,
    )
    carried = {
        p: previous[p] for p in diff.unchanged if p not in undescribed
    }
    result.descriptions = {p: e.description for p, e in carried.items() if e.description}

    if dry_run:
        return result
    if result.is_up_to_date and output_path.is_file():
        logger.info("No changes detected; context map is up to date")
        return result

    needs_service = any(f.tier is not Tier.SKIP for f in classified)
    if free:
        outcome = _free_outcome(classified)
    else:
        # Raises before anything is written when no credential is configured.
        service = service_factory() if needs_service else None
        try:
            outcome = analyze(
                classified,
                service,
                root=root,
                batch_size=config.tiers.batch_size,
                max_concurrent=config.llm.max_concurrent,
                rpm_limit=config.llm.rpm_limit,
                on_progress=on_progress,
                limits=ContentLimits(
                    excerpt_lines=config.tiers.excerpt_lines,
                    excerpt_chars=config.tiers.excerpt_chars,
                    max_deep_chars=config.tiers.max_deep_chars,
                ),
            )
        finally:
            close = getattr(service, "close", None)
            if close is not None:
                close()

    result.descriptions.update(outcome.descriptions)
    result.pending = list(outcome.pending)
    result.service_calls = outcome.service_calls

    stamp = clock().isoformat()
    entries: Dict[str, DigestEntry] = dict(carried)
    for f in classified:
        description = outcome.descriptions.get(f.path)
        if description is None:
            continue
        entries[f.path] = DigestEntry(
            digest=diff.digests[f.path],
            tier=f.tier.value,
            description=description,
            last_analyzed=stamp,
        )

    write_map(output_path, result.descriptions, root.name, result.pending)
    store.save(entries)
    result.written = True

    if result.pending:
        logger.warning(
            "%d files pending; the next refresh will retry them", len(result.pending)
        )
    return result
