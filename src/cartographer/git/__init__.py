"""Git interface layer."""

from cartographer.git.adapter import GitError, count_commits_since, get_hooks_dir, get_repo_root

__all__ = ["GitError", "count_commits_since", "get_hooks_dir", "get_repo_root"]
