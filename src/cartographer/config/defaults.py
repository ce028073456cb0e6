"""Starter .cartographer.toml template."""

DEFAULT_TOML = """\
# cartographer configuration
version = "1.0"

[output]
path = ".ai/context-map.md"

[discovery]
# ignore_paths = ["node_modules", ".git", "dist", "build", "vendor"]

[tiers]
# key_entry_points = ["src/index.ts", "main"]   # always analyzed in depth
# deep_patterns = ["src/core/*"]
# skip_patterns = ["package-lock.json", "*.min.js"]   # described statically
batch_size = 15

[llm]
provider = "anthropic"     # anthropic | openai
# api_key = ""             # prefer ANTHROPIC_API_KEY / OPENAI_API_KEY
# batch_model = "claude-haiku-4-5-20251001"
# deep_model = "claude-sonnet-4-5-20250929"
max_concurrent = 5
rpm_limit = 50             # requests per minute, 0 = unlimited

[cache]
dir = ".ai/.cache"
"""
