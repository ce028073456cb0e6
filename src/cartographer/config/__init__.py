"""Configuration loading, schema, and defaults."""

from cartographer.config.loader import (
    ConfigError,
    load_config,
    resolve_cache_dir,
    resolve_output_path,
)
from cartographer.config.schema import CartographerConfig

__all__ = [
    "CartographerConfig",
    "ConfigError",
    "load_config",
    "resolve_cache_dir",
    "resolve_output_path",
]
