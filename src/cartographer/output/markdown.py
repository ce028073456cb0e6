"""Markdown context map writer."""

from __future__ import annotations

import posixpath
from collections import defaultdict
from datetime import date
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence


def _group_by_directory(paths: Sequence[str]) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = defaultdict(list)
    for path in sorted(paths):
        groups[posixpath.dirname(path)].append(path)
    return groups


def render_map(
    descriptions: Mapping[str, str],
    project_name: str,
    pending: Sequence[str] = (),
    generated_on: Optional[date] = None,
) -> str:
    """Render the context map. Output depends only on the arguments."""
    generated_on = generated_on or date.today()
    lines = [
        f"# {project_name}: context map",
        "",
        f"> {len(descriptions)} files described. Generated by cartographer on "
        f"{generated_on.isoformat()}.",
        "> Keep it current with `cartographer refresh`.",
        "",
    ]

    for directory, paths in sorted(_group_by_directory(list(descriptions)).items()):
        lines.append(f"## `{directory}/`" if directory else "## `./`")
        lines.append("")
        for path in paths:
            lines.append(f"- `{posixpath.basename(path)}`: {descriptions[path]}")
        lines.append("")

    if pending:
        lines.append("## Pending analysis")
        lines.append("")
        lines.append(
            "These files could not be described in the last run; "
            "`cartographer refresh` retries them."
        )
        lines.append("")
        lines.extend(f"- `{path}`" for path in sorted(pending))
        lines.append("")

    return "\n".join(lines)


def write_map(
    path: Path,
    descriptions: Mapping[str, str],
    project_name: str,
    pending: Sequence[str] = (),
) -> str:
    """Render and write the map to *path*. Returns the rendered text."""
    content = render_map(descriptions, project_name, pending)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return content


def estimate_tokens(content: str) -> int:
    """Rough token count (four characters per token)."""
    return -(-len(content) // 4)
