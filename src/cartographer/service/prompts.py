"""Prompt construction and reply parsing shared by all backends."""

from __future__ import annotations

import json
import re
from typing import List

from cartographer.service.base import FileContent, FileDescription, FileExcerpt, ServiceError

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def batch_prompt(files: List[FileExcerpt]) -> str:
    file_list = "\n\n".join(
        f"[{i}] {f.path}\n```\n{f.excerpt}\n```" for i, f in enumerate(files, 1)
    )
    return (
        "You are analyzing source code files. For each file below, write a single "
        "concise sentence (max 15 words) describing what the file does. Focus on "
        "PURPOSE and INTENT, not implementation details.\n\n"
        'Return ONLY a JSON array of objects with "path" and "description" fields. '
        "No markdown, no explanation.\n\n"
        f"Files:\n\n{file_list}"
    )


def deep_prompt(file: FileContent) -> str:
    return (
        "You are analyzing a key source code file. Write a concise description "
        "(1-2 sentences, max 30 words) of what this file does. Focus on its PURPOSE, "
        "ROLE in the project, and KEY RESPONSIBILITIES.\n\n"
        f"File: {file.path}\n\n```\n{file.content}\n```\n\n"
        "Return ONLY the description text, nothing else."
    )


def parse_batch_reply(text: str) -> List[FileDescription]:
    """Extract the JSON array of {path, description} objects from *text*."""
    match = _JSON_ARRAY_RE.search(text)
    if match is None:
        raise ServiceError("batch reply contains no JSON array")
    try:
        items = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ServiceError(f"batch reply is not valid JSON: {exc}") from exc

    results: List[FileDescription] = []
    for item in items:
        if not isinstance(item, dict):
            raise ServiceError("batch reply item is not an object")
        path, description = item.get("path"), item.get("description")
        if not isinstance(path, str) or not isinstance(description, str):
            raise ServiceError("batch reply item lacks path/description strings")
        if not description.strip():
            raise ServiceError(f"empty description for {path}")
        results.append(FileDescription(path=path, description=description.strip()))
    return results


def parse_deep_reply(path: str, text: str) -> FileDescription:
    description = text.strip()
    if not description:
        raise ServiceError(f"empty description for {path}")
    return FileDescription(path=path, description=description)
