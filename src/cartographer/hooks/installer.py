"""Post-commit hook installer — cartographer install / uninstall.

The hook section is delimited by a marker line so it can live alongside
hooks installed by other tools.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from cartographer.git.adapter import GitError, get_hooks_dir

_HOOK_MARKER = "# cartographer-hook"
_HOOK_COMMAND = "cartographer refresh --quiet 2>/dev/null || true"
_HOOK_SECTION = f"""\
{_HOOK_MARKER}
{_HOOK_COMMAND}
"""
_HOOK_SCRIPT = f"#!/bin/sh\n{_HOOK_SECTION}"


def _hooks_dir(repo_root: Path) -> Optional[Path]:
    try:
        return get_hooks_dir(repo_root)
    except GitError:
        return None


def install_hook(repo_root: Path, *, force: bool = False) -> Tuple[bool, str]:
    """Install the auto-refresh post-commit hook.

    An existing foreign hook is extended with the cartographer section;
    ``force`` replaces it instead. Returns (success, message).
    """
    hooks_dir = _hooks_dir(repo_root)
    if hooks_dir is None:
        return False, f"Not a git repository: {repo_root}"

    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook_path = hooks_dir / "post-commit"

    if hook_path.exists() and not force:
        content = hook_path.read_text(encoding="utf-8", errors="replace")
        if _HOOK_MARKER in content:
            return True, "cartographer hook is already installed."
        if not content.endswith("\n"):
            content += "\n"
        hook_path.write_text(f"{content}\n{_HOOK_SECTION}", encoding="utf-8")
        message = f"Added cartographer to the existing post-commit hook at {hook_path}"
    else:
        hook_path.write_text(_HOOK_SCRIPT, encoding="utf-8")
        message = f"Installed cartographer post-commit hook at {hook_path}"

    try:
        hook_path.chmod(0o755)
    except OSError:
        pass  # Windows doesn't need chmod

    return True, message


def uninstall_hook(repo_root: Path) -> Tuple[bool, str]:
    """Remove the cartographer section, deleting the hook if nothing else remains.

    Returns (success, message).
    """
    hooks_dir = _hooks_dir(repo_root)
    if hooks_dir is None:
        return False, f"Not a git repository: {repo_root}"
    hook_path = hooks_dir / "post-commit"

    if not hook_path.exists():
        return True, "No post-commit hook found, nothing to remove."

    content = hook_path.read_text(encoding="utf-8", errors="replace")
    if _HOOK_MARKER not in content:
        return False, "Post-commit hook exists but was not installed by cartographer."

    kept = [
        line for line in content.splitlines()
        if line.strip() not in (_HOOK_MARKER, _HOOK_COMMAND)
    ]
    remaining = "\n".join(kept).strip()
    if remaining in ("", "#!/bin/sh"):
        hook_path.unlink()
        return True, f"Removed cartographer post-commit hook from {hook_path}"

    hook_path.write_text(remaining + "\n", encoding="utf-8")
    return True, "Removed cartographer from the post-commit hook (other hooks preserved)"
