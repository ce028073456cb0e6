"""Rule registry — assembles built-in and custom rules into TierRules."""

from __future__ import annotations

from pathlib import Path
from typing import List

import yaml

from cartographer.config.loader import ConfigError
from cartographer.config.schema import CartographerConfig
from cartographer.rules.models import DescriptionRule, Tier, TierRules

CUSTOM_RULES_DIR = ".cartographer-rules"


class RuleRegistry:
    """Ordered store of description rules and extra deep patterns.

    Custom rules are consulted before built-ins, in file order.
    """

    def __init__(self) -> None:
        self._custom: List[DescriptionRule] = []
        self._builtin: List[DescriptionRule] = []
        self._deep_patterns: List[str] = []

    # ---- registration ----

    def register_builtin(self, rules: List[DescriptionRule]) -> None:
        self._builtin.extend(rules)

    def register_custom(self, rule: DescriptionRule) -> None:
        self._custom.append(rule)

    def register_deep_pattern(self, pattern: str) -> None:
        self._deep_patterns.append(pattern)

    # ---- queries ----

    @property
    def description_rules(self) -> List[DescriptionRule]:
        return [*self._custom, *self._builtin]

    @property
    def custom_sources(self) -> List[str]:
        """Rule files that contributed custom descriptions, in load order."""
        return list(dict.fromkeys(rule.source for rule in self._custom))

    @property
    def deep_patterns(self) -> List[str]:
        return list(self._deep_patterns)

    def tier_rules(self, config: CartographerConfig) -> TierRules:
        """Combine registry contents with the config's tier section."""
        return TierRules(
            key_entry_points=list(config.tiers.key_entry_points),
            deep_patterns=[*config.tiers.deep_patterns, *self._deep_patterns],
            skip_patterns=list(config.tiers.skip_patterns),
            descriptions=self.description_rules,
        )

    # ---- custom rule loading ----

    def load_custom_rules(self, directory: Path) -> int:
        """Load YAML rule files from *directory*. Returns count loaded."""
        count = 0
        if not directory.is_dir():
            return 0
        for path in sorted(directory.iterdir()):
            if path.suffix in (".yaml", ".yml"):
                count += self._load_yaml_rules(path)
        return count

    def _load_yaml_rules(self, path: Path) -> int:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Failed to parse rule file {path}: {exc}") from exc
        if data is None:
            return 0
        if not isinstance(data, list):
            data = [data]
        count = 0
        for entry in data:
            if not isinstance(entry, dict) or not isinstance(entry.get("pattern"), str):
                raise ConfigError(f"{path}: every rule needs a 'pattern' string")
            tier = entry.get("tier", Tier.SKIP.value)
            if tier == Tier.DEEP.value:
                self.register_deep_pattern(entry["pattern"])
            elif tier == Tier.SKIP.value:
                description = entry.get("description")
                if not isinstance(description, str) or not description.strip():
                    raise ConfigError(
                        f"{path}: rule {entry['pattern']!r} needs a 'description'"
                    )
                self.register_custom(
                    DescriptionRule(entry["pattern"], description.strip(), source=str(path))
                )
            else:
                raise ConfigError(
                    f"{path}: rule {entry['pattern']!r} has unsupported tier {tier!r}"
                )
            count += 1
        return count


def build_registry(repo_root: Path) -> RuleRegistry:
    """Create a registry with built-in rules and any custom rule files."""
    from cartographer.rules.builtin import ALL_BUILTIN_RULES

    registry = RuleRegistry()
    registry.load_custom_rules(repo_root / CUSTOM_RULES_DIR)
    registry.register_builtin(ALL_BUILTIN_RULES)
    return registry
