"""
Tests for the HTTP providers against a local aiohttp server.
"""
import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from phrasedeck.errors import MalformedResponseError, TransportError
from phrasedeck.services import AIConfig, AIProvider, GeminiProvider, OpenAIProvider, create_generation_client
from phrasedeck.templates import PHRASE_SCHEMA
from tests.conftest import make_payload


async def _serve(handler, path):
    app = web.Application()
    app.router.add_post(path, handler)
    server = TestServer(app)
    await server.start_server()
    return server


class TestGeminiProvider:
    """generateContent request shape and response extraction."""

    @pytest.mark.asyncio
    async def test_returns_candidate_text(self):
        seen = {}

        async def handler(request):
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = await request.json()
            return web.json_response({
                "candidates": [{"content": {"parts": [{"text": make_payload()}]}}]
            })

        server = await _serve(handler, "/models/test-model:generateContent")
        provider = GeminiProvider(AIConfig(
            provider=AIProvider.GEMINI,
            model="test-model",
            api_key="secret",
            base_url=str(server.make_url("")).rstrip("/"),
        ))
        try:
            text = await provider.complete_structured("prompt text", PHRASE_SCHEMA)
        finally:
            await provider.close()
            await server.close()

        assert len(json.loads(text)) == 10
        assert seen["key"] == "secret"
        config = seen["body"]["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert config["responseSchema"] == PHRASE_SCHEMA
        assert seen["body"]["contents"][0]["parts"][0]["text"] == "prompt text"

    @pytest.mark.asyncio
    async def test_non_200_is_transport_error(self):
        async def handler(request):
            return web.Response(status=503, text="overloaded")

        server = await _serve(handler, "/models/m:generateContent")
        provider = GeminiProvider(AIConfig(model="m", base_url=str(server.make_url("")).rstrip("/")))
        try:
            with pytest.raises(TransportError) as exc_info:
                await provider.complete_structured("p", PHRASE_SCHEMA)
        finally:
            await provider.close()
            await server.close()

        assert exc_info.value.status == 503

    @pytest.mark.asyncio
    async def test_missing_candidates_is_malformed(self):
        async def handler(request):
            return web.json_response({"promptFeedback": {"blockReason": "SAFETY"}})

        server = await _serve(handler, "/models/m:generateContent")
        provider = GeminiProvider(AIConfig(model="m", base_url=str(server.make_url("")).rstrip("/")))
        try:
            with pytest.raises(MalformedResponseError):
                await provider.complete_structured("p", PHRASE_SCHEMA)
        finally:
            await provider.close()
            await server.close()

    @pytest.mark.asyncio
    async def test_non_json_body_is_malformed(self):
        async def handler(request):
            return web.Response(status=200, text="<html>oops</html>")

        server = await _serve(handler, "/models/m:generateContent")
        provider = GeminiProvider(AIConfig(model="m", base_url=str(server.make_url("")).rstrip("/")))
        try:
            with pytest.raises(MalformedResponseError):
                await provider.complete_structured("p", PHRASE_SCHEMA)
        finally:
            await provider.close()
            await server.close()

    @pytest.mark.asyncio
    async def test_connection_refused_is_transport_error(self):
        provider = GeminiProvider(AIConfig(model="m", base_url="http://127.0.0.1:9"))
        try:
            with pytest.raises(TransportError):
                await provider.complete_structured("p", PHRASE_SCHEMA)
        finally:
            await provider.close()


class TestOpenAIProvider:
    """Chat completions with a strict json_schema response format."""

    @pytest.mark.asyncio
    async def test_wraps_schema_and_returns_message_content(self):
        seen = {}

        async def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = await request.json()
            content = json.dumps({"phrases": json.loads(make_payload())})
            return web.json_response({"choices": [{"message": {"content": content}}]})

        server = await _serve(handler, "/chat/completions")
        provider = OpenAIProvider(AIConfig(
            provider=AIProvider.OPENAI,
            model="gpt-test",
            api_key="sk-test",
            base_url=str(server.make_url("")).rstrip("/"),
        ))
        try:
            text = await provider.complete_structured("p", PHRASE_SCHEMA)
        finally:
            await provider.close()
            await server.close()

        assert len(json.loads(text)["phrases"]) == 10
        assert seen["auth"] == "Bearer sk-test"
        schema = seen["body"]["response_format"]["json_schema"]["schema"]
        assert schema["required"] == ["phrases"]
        assert schema["properties"]["phrases"]["type"] == "array"
        assert schema["properties"]["phrases"]["items"]["additionalProperties"] is False


class TestCreateGenerationClient:
    """Factory wiring."""

    def test_unknown_provider_falls_back_to_gemini(self):
        client = create_generation_client(provider="something-else", api_key="k")
        assert isinstance(client.provider, GeminiProvider)

    def test_openai_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "env-key")
        client = create_generation_client(provider="openai")
        assert isinstance(client.provider, OpenAIProvider)
        assert client.provider.config.api_key == "env-key"
        assert client.provider.config.model == "gpt-4o-mini"

    def test_client_kwargs_pass_through(self):
        client = create_generation_client(api_key="k", max_attempts=3, base_delay_ms=500)
        assert client.max_attempts == 3
        assert client.base_delay_ms == 500
