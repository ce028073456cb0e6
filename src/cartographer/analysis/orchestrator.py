"""Analysis orchestrator — turns classified files into descriptions.

SKIP files are answered from their static description. BATCH files go to
the service in chunks, DEEP files one by one. Chunks and deep files (the
"units") run on a bounded thread pool and every request first takes a slot
from the shared RateLimiter, so the rate limit is the binding constraint and
the pool only keeps it busy.

Failures never abort the run: a failed chunk marks all of its files pending,
a failed deep file marks only itself.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from cartographer.analysis.limiter import RateLimiter
from cartographer.analysis.models import AnalysisOutcome, ContentLimits
from cartographer.classifier.engine import FALLBACK_SKIP_DESCRIPTION, ClassifiedFile
from cartographer.rules.models import Tier
from cartographer.service.base import DescriptionService, FileContent, FileExcerpt

logger = logging.getLogger(__name__)

# Receives (completed units, total units) after every chunk or deep file.
ProgressCallback = Callable[[int, int], None]


@dataclass
class _UnitResult:
    descriptions: Dict[str, str] = field(default_factory=dict)
    failed: List[str] = field(default_factory=list)
    calls: int = 0


def read_excerpt(path: Path, limits: ContentLimits) -> str:
    """Leading lines of *path*, capped in characters. Unreadable -> ''."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("No excerpt for %s: %s", path, exc)
        return ""
    head = "\n".join(text.split("\n")[: limits.excerpt_lines])
    return head[: limits.excerpt_chars]


def read_content(path: Path, limits: ContentLimits) -> str:
    """Full text of *path*, truncated to ``max_deep_chars``."""
    return path.read_text(encoding="utf-8")[: limits.max_deep_chars]


def _usable(description: object) -> bool:
    return isinstance(description, str) and bool(description.strip())


def chunked(items: Sequence[ClassifiedFile], size: int) -> List[List[ClassifiedFile]]:
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class _Runner:
    def __init__(
        self,
        service: DescriptionService,
        root: Path,
        limiter: RateLimiter,
        limits: ContentLimits,
    ) -> None:
        self.service = service
        self.root = root
        self.limiter = limiter
        self.limits = limits

    def run_chunk(self, chunk: List[ClassifiedFile]) -> _UnitResult:
        paths = [f.path for f in chunk]
        excerpts = [
            FileExcerpt(f.path, read_excerpt(self.root / f.path, self.limits)) for f in chunk
        ]
        self.limiter.acquire()
        try:
            replies = self.service.describe_batch(excerpts)
            by_path = {r.path: r.description for r in replies}
        except Exception as exc:
            logger.warning("Batch of %d files failed: %s", len(paths), exc)
            return _UnitResult(failed=paths, calls=1)

        missing = [p for p in paths if not _usable(by_path.get(p))]
        if missing:
            # The reply is all-or-nothing for the chunk.
            logger.warning(
                "Batch reply covered %d of %d files; marking chunk pending",
                len(paths) - len(missing),
                len(paths),
            )
            return _UnitResult(failed=paths, calls=1)
        extra = set(by_path) - set(paths)
        if extra:
            logger.debug("Ignoring %d unrequested paths in batch reply", len(extra))
        return _UnitResult(descriptions={p: by_path[p].strip() for p in paths}, calls=1)

    def run_deep(self, file: ClassifiedFile) -> _UnitResult:
        try:
            content = read_content(self.root / file.path, self.limits)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read %s for deep analysis: %s", file.path, exc)
            return _UnitResult(failed=[file.path])

        self.limiter.acquire()
        try:
            reply = self.service.describe_file(FileContent(file.path, content))
            description = reply.description
        except Exception as exc:
            logger.warning("Deep analysis of %s failed: %s", file.path, exc)
            return _UnitResult(failed=[file.path], calls=1)
        if not _usable(description):
            logger.warning("Deep analysis of %s returned no description", file.path)
            return _UnitResult(failed=[file.path], calls=1)
        return _UnitResult(descriptions={file.path: description.strip()}, calls=1)


def _notify(on_progress: Optional[ProgressCallback], completed: int, total: int) -> None:
    if on_progress is None:
        return
    try:
        on_progress(completed, total)
    except Exception:
        logger.exception("Progress callback raised; continuing")


def analyze(
    files: Sequence[ClassifiedFile],
    service: Optional[DescriptionService],
    *,
    root: Path,
    batch_size: int = 15,
    max_concurrent: int = 5,
    rpm_limit: int = 50,
    on_progress: Optional[ProgressCallback] = None,
    limits: ContentLimits = ContentLimits(),
    limiter: Optional[RateLimiter] = None,
) -> AnalysisOutcome:
    """Describe *files*. ``service`` may be None only if every file is SKIP."""
    outcome = AnalysisOutcome()

    batch_files: List[ClassifiedFile] = []
    deep_files: List[ClassifiedFile] = []
    for f in sorted(files, key=lambda f: f.path):
        if f.tier is Tier.SKIP:
            outcome.descriptions[f.path] = f.auto_description or FALLBACK_SKIP_DESCRIPTION
        elif f.tier is Tier.DEEP:
            deep_files.append(f)
        else:
            batch_files.append(f)

    chunks = chunked(batch_files, batch_size)
    total = len(chunks) + len(deep_files)
    if total == 0:
        return outcome
    if service is None:
        raise ValueError("a DescriptionService is required for batch and deep files")

    runner = _Runner(service, root, limiter or RateLimiter(rpm_limit), limits)
    completed = 0
    pending: List[str] = []

    with ThreadPoolExecutor(
        max_workers=max(1, min(max_concurrent, total)),
        thread_name_prefix="cartographer-analyze",
    ) as pool:
        futures = [pool.submit(runner.run_chunk, c) for c in chunks]
        futures += [pool.submit(runner.run_deep, f) for f in deep_files]

        for future in as_completed(futures):
            result = future.result()
            outcome.descriptions.update(result.descriptions)
            pending.extend(result.failed)
            outcome.service_calls += result.calls
            completed += 1
            _notify(on_progress, completed, total)

    outcome.pending = sorted(pending)
    return outcome
