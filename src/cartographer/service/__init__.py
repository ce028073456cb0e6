"""Description Service contract and HTTP backends."""

from cartographer.service.base import (
    DescriptionService,
    FileContent,
    FileDescription,
    FileExcerpt,
    ServiceConfigError,
    ServiceError,
)
from cartographer.service.client import create_service

__all__ = [
    "DescriptionService",
    "FileContent",
    "FileDescription",
    "FileExcerpt",
    "ServiceConfigError",
    "ServiceError",
    "create_service",
]
