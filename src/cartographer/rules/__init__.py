"""Tier rules — models, registry, built-in description table."""

from cartographer.rules.models import DescriptionRule, Tier, TierRules
from cartographer.rules.registry import RuleRegistry, build_registry

__all__ = ["DescriptionRule", "RuleRegistry", "Tier", "TierRules", "build_registry"]
