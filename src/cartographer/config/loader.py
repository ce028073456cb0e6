"""Load and merge configuration from .cartographer.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from cartographer.config.schema import (
    PROVIDERS,
    CacheConfig,
    CartographerConfig,
    DiscoveryConfig,
    LLMConfig,
    OutputConfig,
    TiersConfig,
)

CONFIG_FILENAMES = (".cartographer.toml", ".ai/cartographer.toml")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    for name in CONFIG_FILENAMES:
        candidate = repo_root / name
        if candidate.is_file():
            return candidate
    return None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _env_int(name: str) -> Optional[int]:
    val = os.environ.get(name)
    if val is None or not val.strip():
        return None
    try:
        return int(val)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {val!r}") from exc


def _merge_env_overrides(cfg: CartographerConfig) -> None:
    """Apply CARTOGRAPHER_* environment variable overrides."""
    if val := os.environ.get("CARTOGRAPHER_PROVIDER"):
        cfg.llm.provider = val  # type: ignore[assignment]
    if val := os.environ.get("CARTOGRAPHER_OUTPUT"):
        cfg.output.path = val
    if (n := _env_int("CARTOGRAPHER_BATCH_SIZE")) is not None:
        cfg.tiers.batch_size = n
    if (n := _env_int("CARTOGRAPHER_MAX_CONCURRENT")) is not None:
        cfg.llm.max_concurrent = n
    if (n := _env_int("CARTOGRAPHER_RPM_LIMIT")) is not None:
        cfg.llm.rpm_limit = n


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def validate(cfg: CartographerConfig) -> None:
    """Reject values the pipeline cannot run with."""
    if cfg.llm.provider not in PROVIDERS:
        raise ConfigError(
            f"Unknown provider {cfg.llm.provider!r} (expected one of: {', '.join(PROVIDERS)})"
        )
    if cfg.tiers.batch_size < 1:
        raise ConfigError("tiers.batch_size must be at least 1")
    if cfg.llm.max_concurrent < 1:
        raise ConfigError("llm.max_concurrent must be at least 1")
    if cfg.llm.rpm_limit < 0:
        raise ConfigError("llm.rpm_limit must not be negative (0 disables the limit)")
    for name in ("key_entry_points", "skip_patterns", "deep_patterns"):
        value = getattr(cfg.tiers, name)
        if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
            raise ConfigError(f"tiers.{name} must be a list of strings")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> CartographerConfig:
    """Load, validate, and return a CartographerConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = CartographerConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = CartographerConfig(
            version=raw.get("version", "1.0"),
            output=_build_section(raw, OutputConfig, "output"),
            discovery=_build_section(raw, DiscoveryConfig, "discovery"),
            tiers=_build_section(raw, TiersConfig, "tiers"),
            llm=_build_section(raw, LLMConfig, "llm"),
            cache=_build_section(raw, CacheConfig, "cache"),
        )

    _merge_env_overrides(cfg)
    validate(cfg)
    return cfg


def resolve_output_path(repo_root: Path, cfg: CartographerConfig) -> Path:
    return (repo_root / cfg.output.path).resolve()


def resolve_cache_dir(repo_root: Path, cfg: CartographerConfig) -> Path:
    return (repo_root / cfg.cache.dir).resolve()


def relative_to_root(repo_root: Path, path: Path) -> Optional[str]:
    """POSIX path of *path* below *repo_root*, or None if it lies outside."""
    try:
        rel = path.resolve().relative_to(repo_root.resolve()).as_posix()
    except ValueError:
        return None
    return None if rel == "." else rel
