"""Built-in description rules — aggregate all categories."""

from cartographer.rules.builtin.lockfiles import ALL_LOCKFILE_RULES
from cartographer.rules.builtin.project import ALL_PROJECT_RULES
from cartographer.rules.builtin.tooling import ALL_TOOLING_RULES
from cartographer.rules.models import DescriptionRule

ALL_BUILTIN_RULES: list[DescriptionRule] = [
    *ALL_LOCKFILE_RULES,
    *ALL_TOOLING_RULES,
    *ALL_PROJECT_RULES,
]

__all__ = ["ALL_BUILTIN_RULES"]
