"""Shared HTTP plumbing for the chat-completion backends."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from cartographer.service.base import FileContent, FileDescription, FileExcerpt, ServiceError
from cartographer.service.prompts import (
    batch_prompt,
    deep_prompt,
    parse_batch_reply,
    parse_deep_reply,
)

logger = logging.getLogger(__name__)

BATCH_MAX_TOKENS = 1024
DEEP_MAX_TOKENS = 256


class HttpDescriptionService:
    """Base class: subclasses build the request and read the reply text.

    The underlying ``httpx.Client`` is shared by worker threads.
    """

    default_base_url = ""

    def __init__(
        self,
        *,
        api_key: str,
        batch_model: str,
        deep_model: str,
        timeout_s: float = 60.0,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.batch_model = batch_model
        self.deep_model = deep_model
        self.client = httpx.Client(
            base_url=base_url or self.default_base_url,
            headers=self._headers(api_key),
            timeout=timeout_s,
            transport=transport,
        )

    # ---- subclass hooks ----

    def _headers(self, api_key: str) -> Dict[str, str]:
        raise NotImplementedError

    def _endpoint(self) -> str:
        raise NotImplementedError

    def _payload(self, model: str, prompt: str, max_tokens: int) -> Dict[str, Any]:
        raise NotImplementedError

    def _reply_text(self, data: Dict[str, Any]) -> str:
        raise NotImplementedError

    # ---- DescriptionService ----

    def describe_batch(self, files: List[FileExcerpt]) -> List[FileDescription]:
        text = self._complete(self.batch_model, batch_prompt(files), BATCH_MAX_TOKENS)
        return parse_batch_reply(text)

    def describe_file(self, file: FileContent) -> FileDescription:
        text = self._complete(self.deep_model, deep_prompt(file), DEEP_MAX_TOKENS)
        return parse_deep_reply(file.path, text)

    def close(self) -> None:
        self.client.close()

    def _complete(self, model: str, prompt: str, max_tokens: int) -> str:
        try:
            response = self.client.post(
                self._endpoint(), json=self._payload(model, prompt, max_tokens)
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ServiceError(
                f"{model} request failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ServiceError(f"{model} request failed: {exc}") from exc
        except ValueError as exc:
            raise ServiceError(f"{model} returned a non-JSON body") from exc

        try:
            text = self._reply_text(data)
        except (KeyError, IndexError, TypeError) as exc:
            raise ServiceError(f"{model} reply has an unexpected shape") from exc
        logger.debug("%s replied with %d characters", model, len(text))
        return text
