"""Backend selection and credential lookup."""

from __future__ import annotations

import os
from typing import Optional

import httpx

from cartographer.config.schema import CartographerConfig
from cartographer.service.anthropic import AnthropicService
from cartographer.service.base import ServiceConfigError
from cartographer.service.http import HttpDescriptionService
from cartographer.service.openai import OpenAIService

API_KEY_ENV = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


def resolve_api_key(config: CartographerConfig) -> Optional[str]:
    if config.llm.api_key:
        return config.llm.api_key
    return os.environ.get(API_KEY_ENV[config.llm.provider]) or None


def create_service(
    config: CartographerConfig,
    transport: Optional[httpx.BaseTransport] = None,
) -> HttpDescriptionService:
    """Build the configured backend. Raises ServiceConfigError without a key."""
    api_key = resolve_api_key(config)
    if not api_key:
        env_var = API_KEY_ENV[config.llm.provider]
        raise ServiceConfigError(
            f"No API key found. Set {env_var} or add llm.api_key to the config, "
            "or run with --free for pattern-based descriptions."
        )

    cls = AnthropicService if config.llm.provider == "anthropic" else OpenAIService
    return cls(
        api_key=api_key,
        batch_model=config.llm.batch_model,
        deep_model=config.llm.deep_model,
        timeout_s=config.llm.timeout_s,
        base_url=config.llm.base_url,
        transport=transport,
    )
