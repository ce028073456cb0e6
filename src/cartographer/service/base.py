"""Description Service contract — request/response models and errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, runtime_checkable


class ServiceError(Exception):
    """A single request failed (network, auth, or unusable reply)."""


class ServiceConfigError(Exception):
    """The service cannot be constructed, e.g. no API key is configured."""


@dataclass(frozen=True)
class FileExcerpt:
    """Leading slice of a batch-tier file."""

    path: str
    excerpt: str


@dataclass(frozen=True)
class FileContent:
    """Full (possibly truncated) content of a deep-tier file."""

    path: str
    content: str


@dataclass(frozen=True)
class FileDescription:
    path: str
    description: str


@runtime_checkable
class DescriptionService(Protocol):
    """Turns file content into one-line descriptions.

    ``describe_batch`` returns one description per input, in any order.
    Both methods raise ServiceError on failure.
    """

    def describe_batch(self, files: List[FileExcerpt]) -> List[FileDescription]:
        ...

    def describe_file(self, file: FileContent) -> FileDescription:
        ...
