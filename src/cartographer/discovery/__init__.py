"""File discovery — ignore rules and directory walking."""

from cartographer.discovery.ignore import IgnoreRules
from cartographer.discovery.lister import list_files
from cartographer.discovery.models import FileRecord

__all__ = ["FileRecord", "IgnoreRules", "list_files"]
