"""OpenAI Chat Completions API backend."""

from __future__ import annotations

from typing import Any, Dict

from cartographer.service.http import HttpDescriptionService


class OpenAIService(HttpDescriptionService):
    default_base_url = "https://api.openai.com"

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "authorization": f"Bearer {api_key}",
            "content-type": "application/json",
        }

    def _endpoint(self) -> str:
        return "/v1/chat/completions"

    def _payload(self, model: str, prompt: str, max_tokens: int) -> Dict[str, Any]:
        return {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    def _reply_text(self, data: Dict[str, Any]) -> str:
        return data["choices"][0]["message"]["content"] or ""
