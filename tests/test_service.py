"""Tests for prompt parsing and the HTTP Description Service backends."""

import json

import httpx
import pytest

from cartographer.config.schema import CartographerConfig
from cartographer.service.anthropic import AnthropicService
from cartographer.service.base import (
    DescriptionService,
    FileContent,
    FileExcerpt,
    ServiceConfigError,
    ServiceError,
)
from cartographer.service.client import create_service, resolve_api_key
from cartographer.service.openai import OpenAIService
from cartographer.service.prompts import (
    batch_prompt,
    deep_prompt,
    parse_batch_reply,
    parse_deep_reply,
)


class TestPrompts:
    def test_batch_prompt_lists_every_file(self):
        prompt = batch_prompt([FileExcerpt("a.py", "import os"), FileExcerpt("b.py", "x = 1")])
        assert "[1] a.py" in prompt
        assert "[2] b.py" in prompt
        assert "JSON array" in prompt

    def test_deep_prompt_includes_content(self):
        prompt = deep_prompt(FileContent("main.py", "def main(): ..."))
        assert "File: main.py" in prompt
        assert "def main(): ..." in prompt

    def test_parse_batch_reply_with_prose(self):
        text = 'Sure!\n[{"path": "a.py", "description": " Loads config "}]\nDone.'
        replies = parse_batch_reply(text)
        assert len(replies) == 1
        assert replies[0].path == "a.py"
        assert replies[0].description == "Loads config"

    def test_parse_batch_reply_without_array(self):
        with pytest.raises(ServiceError):
            parse_batch_reply("I could not read these files.")

    def test_parse_batch_reply_invalid_json(self):
        with pytest.raises(ServiceError):
            parse_batch_reply('[{"path": "a.py", "description": }]')

    def test_parse_batch_reply_missing_fields(self):
        with pytest.raises(ServiceError):
            parse_batch_reply('[{"path": "a.py"}]')

    def test_parse_batch_reply_empty_description(self):
        with pytest.raises(ServiceError):
            parse_batch_reply('[{"path": "a.py", "description": "  "}]')

    def test_parse_deep_reply(self):
        assert parse_deep_reply("a.py", "  Runs the app.\n").description == "Runs the app."
        with pytest.raises(ServiceError):
            parse_deep_reply("a.py", "\n")


def _anthropic_reply(text: str) -> dict:
    return {"content": [{"type": "text", "text": text}]}


def _openai_reply(text: str) -> dict:
    return {"choices": [{"message": {"content": text}}]}


class TestAnthropicService:
    def _service(self, handler) -> AnthropicService:
        return AnthropicService(
            api_key="sk-test",
            batch_model="haiku",
            deep_model="sonnet",
            transport=httpx.MockTransport(handler),
        )

    def test_describe_batch(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            reply = json.dumps([
                {"path": "b.py", "description": "Second"},
                {"path": "a.py", "description": "First"},
            ])
            return httpx.Response(200, json=_anthropic_reply(reply))

        service = self._service(handler)
        replies = service.describe_batch([FileExcerpt("a.py", "1"), FileExcerpt("b.py", "2")])
        service.close()

        assert {r.path: r.description for r in replies} == {"a.py": "First", "b.py": "Second"}
        assert seen["url"] == "https://api.anthropic.com/v1/messages"
        assert seen["headers"]["x-api-key"] == "sk-test"
        assert seen["headers"]["anthropic-version"] == "2023-06-01"
        assert seen["body"]["model"] == "haiku"

    def test_describe_file_uses_deep_model(self):
        models = []

        def handler(request: httpx.Request) -> httpx.Response:
            models.append(json.loads(request.content)["model"])
            return httpx.Response(200, json=_anthropic_reply("Boots the server."))

        reply = self._service(handler).describe_file(FileContent("main.py", "run()"))
        assert reply.description == "Boots the server."
        assert models == ["sonnet"]

    def test_http_error_becomes_service_error(self):
        service = self._service(lambda request: httpx.Response(529, json={"error": "overloaded"}))
        with pytest.raises(ServiceError, match="529"):
            service.describe_file(FileContent("main.py", "run()"))

    def test_transport_error_becomes_service_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ServiceError):
            self._service(handler).describe_batch([FileExcerpt("a.py", "1")])

    def test_unexpected_shape_becomes_service_error(self):
        service = self._service(lambda request: httpx.Response(200, json={"id": "msg"}))
        with pytest.raises(ServiceError):
            service.describe_file(FileContent("main.py", "run()"))

    def test_satisfies_protocol(self):
        assert isinstance(self._service(lambda r: httpx.Response(200)), DescriptionService)


class TestOpenAIService:
    def test_describe_file(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            return httpx.Response(200, json=_openai_reply("Parses CLI flags."))

        service = OpenAIService(
            api_key="sk-openai",
            batch_model="mini",
            deep_model="large",
            base_url="https://llm.internal.example",
            transport=httpx.MockTransport(handler),
        )
        reply = service.describe_file(FileContent("cli.py", "argparse"))
        assert reply.description == "Parses CLI flags."
        assert seen["url"] == "https://llm.internal.example/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-openai"


class TestCreateService:
    def test_missing_key_raises(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(ServiceConfigError, match="ANTHROPIC_API_KEY"):
            create_service(CartographerConfig())

    def test_env_key(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        cfg = CartographerConfig()
        cfg.llm.provider = "openai"
        assert resolve_api_key(cfg) == "sk-env"
        service = create_service(cfg, transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        assert isinstance(service, OpenAIService)
        service.close()

    def test_config_key_wins(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
        cfg = CartographerConfig()
        cfg.llm.api_key = "sk-config"
        assert resolve_api_key(cfg) == "sk-config"
        service = create_service(cfg, transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        assert isinstance(service, AnthropicService)
        service.close()
