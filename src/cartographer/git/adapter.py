"""Git subprocess wrapper — repo root, hooks directory, commit counts."""

from __future__ import annotations

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    logger.debug("git %s (in %s)", " ".join(args), cwd)
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        raise GitError("git is not installed or not on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitError(f"git {args[0]} timed out after {timeout}s") from exc

    if result.returncode != 0:
        stderr = result.stderr.strip() or f"exit status {result.returncode}"
        raise GitError(f"git {args[0]} failed: {stderr}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the top-level directory of the repository containing *cwd*."""
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd or Path.cwd())
    return Path(out.strip())


def get_hooks_dir(repo_root: Path) -> Path:
    """Where git looks for hooks; honors ``core.hooksPath`` and worktrees."""
    out = _run_git(["rev-parse", "--git-path", "hooks"], cwd=repo_root)
    hooks = Path(out.strip())
    return hooks if hooks.is_absolute() else repo_root / hooks


def count_commits_since(repo_root: Path, since: datetime) -> int:
    """Number of commits reachable from HEAD that are newer than *since*."""
    out = _run_git(
        ["rev-list", "--count", f"--since={since.isoformat()}", "HEAD"],
        cwd=repo_root,
    )
    return int(out.strip() or 0)
