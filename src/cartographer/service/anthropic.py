"""Anthropic Messages API backend."""

from __future__ import annotations

from typing import Any, Dict

from cartographer.service.http import HttpDescriptionService

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicService(HttpDescriptionService):
    default_base_url = "https://api.anthropic.com"

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def _endpoint(self) -> str:
        return "/v1/messages"

    def _payload(self, model: str, prompt: str, max_tokens: int) -> Dict[str, Any]:
        return {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    def _reply_text(self, data: Dict[str, Any]) -> str:
        return "".join(
            block["text"] for block in data["content"] if block.get("type") == "text"
        )
