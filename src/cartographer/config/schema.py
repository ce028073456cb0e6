"""Configuration schema — one dataclass per TOML table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

Provider = Literal["anthropic", "openai"]

PROVIDERS = ("anthropic", "openai")

DEFAULT_IGNORE_PATHS = [
    "node_modules",
    ".git",
    "dist",
    "build",
    "out",
    "vendor",
    "__pycache__",
    ".next",
    ".nuxt",
    "coverage",
    ".nyc_output",
    ".cache",
    ".turbo",
    ".vercel",
    ".ai/.cache",
]

DEFAULT_SKIP_PATTERNS = [
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "bun.lockb",
    "*.min.js",
    "*.min.css",
    "*.d.ts",
    "*.map",
    "*.snap",
    ".eslintrc*",
    ".prettierrc*",
    "tsconfig*.json",
    "jest.config.*",
    "vitest.config.*",
    "vite.config.*",
    "webpack.config.*",
    "rollup.config.*",
    "babel.config.*",
    ".babelrc",
    ".editorconfig",
    ".gitignore",
    ".gitattributes",
    ".npmignore",
    ".npmrc",
    ".nvmrc",
    ".node-version",
    ".env.example",
    "LICENSE",
    "CHANGELOG*",
    "CONTRIBUTING*",
    "CODE_OF_CONDUCT*",
    "Dockerfile",
    "docker-compose*",
    "Makefile",
    "Procfile",
    ".dockerignore",
]


@dataclass
class OutputConfig:
    path: str = ".ai/context-map.md"


@dataclass
class DiscoveryConfig:
    ignore_paths: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATHS))


@dataclass
class TiersConfig:
    key_entry_points: List[str] = field(default_factory=list)
    skip_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_SKIP_PATTERNS))
    deep_patterns: List[str] = field(default_factory=list)
    batch_size: int = 15
    excerpt_lines: int = 50
    excerpt_chars: int = 500
    max_deep_chars: int = 12000


@dataclass
class LLMConfig:
    provider: Provider = "anthropic"
    api_key: Optional[str] = None  # falls back to ANTHROPIC_API_KEY / OPENAI_API_KEY
    batch_model: str = "claude-haiku-4-5-20251001"
    deep_model: str = "claude-sonnet-4-5-20250929"
    max_concurrent: int = 5
    rpm_limit: int = 50  # 0 disables rate limiting
    timeout_s: float = 60.0
    base_url: Optional[str] = None


@dataclass
class CacheConfig:
    dir: str = ".ai/.cache"


@dataclass
class CartographerConfig:
    version: str = "1.0"
    output: OutputConfig = field(default_factory=OutputConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    tiers: TiersConfig = field(default_factory=TiersConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
