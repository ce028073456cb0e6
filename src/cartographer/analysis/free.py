"""Pattern-based descriptions that need no Description Service (``--free``)."""

from __future__ import annotations

import posixpath
import re
from typing import Dict, Iterable

from cartographer.discovery.models import FileRecord

_TEST_SUFFIX_RE = re.compile(r"\.(test|spec)$|_test$")


def _readable(name: str) -> str:
    """kebab-case / snake_case -> Title Case Words."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), re.sub(r"[-_]", " ", name))


def infer_description(record: FileRecord) -> str:
    path = record.path
    basename = posixpath.basename(path)
    directory = posixpath.dirname(path) or "."
    dir_name = posixpath.basename(directory) if directory != "." else ""
    stem = basename[: -len(record.extension)] if record.extension else basename

    if (
        ".test." in basename
        or ".spec." in basename
        or "_test." in basename
        or basename.startswith("test_")
        or "__tests__" in directory
    ):
        subject = _TEST_SUFFIX_RE.sub("", stem)
        if subject.startswith("test_"):
            subject = subject[len("test_"):]
        return f"Tests for {subject}"

    if stem in ("index", "main", "mod", "__init__", "__main__"):
        return f"Entry point for {dir_name or 'project root'} module"

    if "migration" in directory:
        return "Database migration"
    if "route" in directory:
        return f"Route definitions for {stem}"
    if "component" in directory:
        return f"{_readable(stem)} UI component"
    if re.match(r"use[A-Z]", stem):
        return f"{_readable(stem)} React hook"
    if "middleware" in directory:
        return f"{_readable(stem)} middleware"
    if "config" in basename or basename.endswith("rc"):
        return f"Configuration for {stem}"
    if "types" in basename or "interfaces" in basename:
        return f"Type definitions for {dir_name or 'project root'}"
    if stem.upper() == "README":
        return f"Documentation for {dir_name}" if dir_name else "Project documentation"

    context = f" in {dir_name}" if dir_name else ""
    return f"{_readable(stem)}{context}"


def describe_all(records: Iterable[FileRecord]) -> Dict[str, str]:
    return {r.path: infer_description(r) for r in records}
