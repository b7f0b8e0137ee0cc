"""Gemini provider tests against a RESPX-mocked Generative Language API."""

import json

import httpx
import pytest

from sllmi.core.errors import ConfigurationError, GenerationError, ProviderError
from sllmi.core.generation_config import GenerationConfig
from sllmi.providers.gemini import GeminiModel, extract_text, new_gemini_provider
from tests.fixtures.mock_http import create_gemini_error, create_streaming_response, sse_event

GENERATE_PATH = "/models/gemini-2.5-flash:generateContent"
STREAM_PATH = "/models/gemini-2.5-flash:streamGenerateContent"


def make_model(*keys: str) -> GeminiModel:
    return GeminiModel("gemini-2.5-flash", list(keys))


@pytest.mark.unit
class TestExtractText:
    def test_joins_text_parts_and_skips_thoughts(self):
        response = {
            "candidates": [
                {
                    "content": {
                        "parts": [
                            {"text": "thinking...", "thought": True},
                            {"text": "Hello "},
                            {"text": "there"},
                        ]
                    }
                }
            ]
        }

        assert extract_text(response) == "Hello there"

    def test_no_candidates(self):
        assert extract_text({"promptFeedback": {"blockReason": "SAFETY"}}) is None

    def test_candidate_without_text(self):
        assert extract_text({"candidates": [{"content": {"parts": []}}]}) is None


@pytest.mark.unit
class TestGeminiGenerate:
    @pytest.mark.asyncio
    async def test_generate_success(self, mock_gemini_api, gemini_generate_response):
        route = mock_gemini_api.post(GENERATE_PATH).mock(
            return_value=httpx.Response(200, json=gemini_generate_response)
        )

        text = await make_model("key1").generate("Describe the sea")

        assert text == "The sea is wide."
        request = route.calls.last.request
        assert request.headers["x-goog-api-key"] == "key1"
        body = json.loads(request.content)
        assert body["contents"] == [{"role": "user", "parts": [{"text": "Describe the sea"}]}]
        assert "generationConfig" not in body

    @pytest.mark.asyncio
    async def test_generation_config_is_mapped(self, mock_gemini_api, gemini_generate_response):
        route = mock_gemini_api.post(GENERATE_PATH).mock(
            return_value=httpx.Response(200, json=gemini_generate_response)
        )
        config = GenerationConfig(temperature=0.2, top_p=0.9, top_k=40, output_length=256)

        await make_model("key1").generate("hi", config)

        body = json.loads(route.calls.last.request.content)
        assert body["generationConfig"] == {
            "temperature": 0.2,
            "topP": 0.9,
            "topK": 40,
            "maxOutputTokens": 256,
        }

    @pytest.mark.asyncio
    async def test_blocked_prompt_is_not_retried(self, mock_gemini_api, gemini_blocked_response):
        route = mock_gemini_api.post(GENERATE_PATH).mock(
            return_value=httpx.Response(200, json=gemini_blocked_response)
        )

        with pytest.raises(GenerationError, match="no content in response"):
            await make_model("key1", "key2", "key3").generate("something unsafe")

        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_fails_over_to_next_key(
        self, mock_gemini_api, gemini_generate_response, ordered_keys
    ):
        def by_key(request: httpx.Request) -> httpx.Response:
            if request.headers["x-goog-api-key"] == "bad":
                return httpx.Response(
                    400, json=create_gemini_error(400, "INVALID_ARGUMENT", "API key not valid")
                )
            return httpx.Response(200, json=gemini_generate_response)

        route = mock_gemini_api.post(GENERATE_PATH).mock(side_effect=by_key)

        text = await make_model("bad", "good").generate("hi")

        assert text == "The sea is wide."
        assert [call.request.headers["x-goog-api-key"] for call in route.calls] == ["bad", "good"]

    @pytest.mark.asyncio
    async def test_all_keys_failed(self, mock_gemini_api):
        route = mock_gemini_api.post(GENERATE_PATH).mock(
            return_value=httpx.Response(
                400, json=create_gemini_error(400, "INVALID_ARGUMENT", "API key not valid")
            )
        )

        with pytest.raises(GenerationError, match="all API keys failed") as exc_info:
            await make_model("k1", "k2").generate("hi")

        assert route.call_count == 2
        cause = exc_info.value.cause
        assert isinstance(cause, ProviderError)
        assert cause.status_code == 400
        assert "API key not valid" in str(cause)

    @pytest.mark.asyncio
    async def test_network_error_counts_as_key_failure(
        self, mock_gemini_api, gemini_generate_response, ordered_keys
    ):
        route = mock_gemini_api.post(GENERATE_PATH).mock(
            side_effect=[
                httpx.ConnectError("connection refused"),
                httpx.Response(200, json=gemini_generate_response),
            ]
        )

        text = await make_model("k1", "k2").generate("hi")

        assert text == "The sea is wide."
        assert route.call_count == 2


@pytest.mark.unit
class TestGeminiStream:
    @pytest.mark.asyncio
    async def test_streams_text_chunks(self, mock_gemini_api, gemini_streaming_chunks):
        route = mock_gemini_api.post(STREAM_PATH).mock(
            return_value=create_streaming_response(gemini_streaming_chunks)
        )

        async with make_model("key1").generate_stream("Describe the sea") as session:
            chunks = [chunk async for chunk in session]
            error = await session.error()

        assert chunks == ["The sea ", "is wide."]
        assert error is None
        assert route.calls.last.request.url.params["alt"] == "sse"

    @pytest.mark.asyncio
    async def test_error_event_fails_over(
        self, mock_gemini_api, gemini_streaming_chunks, ordered_keys
    ):
        broken = [
            sse_event({"candidates": [{"content": {"parts": [{"text": "partial"}]}}]}),
            sse_event(create_gemini_error(503, "UNAVAILABLE", "model overloaded")),
        ]
        mock_gemini_api.post(STREAM_PATH).mock(
            side_effect=[
                create_streaming_response(broken),
                create_streaming_response(gemini_streaming_chunks),
            ]
        )

        session = make_model("k1", "k2").generate_stream("hi")
        chunks = [chunk async for chunk in session]

        assert chunks == ["partial", "The sea ", "is wide."]
        assert await session.error() is None

    @pytest.mark.asyncio
    async def test_stream_all_keys_failed(self, mock_gemini_api):
        mock_gemini_api.post(STREAM_PATH).mock(
            return_value=httpx.Response(
                429, json=create_gemini_error(429, "RESOURCE_EXHAUSTED", "quota exceeded")
            )
        )

        session = make_model("k1", "k2").generate_stream("hi")
        chunks = [chunk async for chunk in session]
        error = await session.error()

        assert chunks == []
        assert isinstance(error, GenerationError)
        assert "all API keys failed" in str(error)
        assert "quota exceeded" in str(error)


@pytest.mark.unit
class TestGeminiFactory:
    def test_missing_keys(self):
        with pytest.raises(ConfigurationError, match="not set for Gemini provider"):
            new_gemini_provider()

    def test_empty_keys(self, monkeypatch):
        monkeypatch.setenv("GENAI_API_KEYS", "")

        with pytest.raises(ConfigurationError, match="is empty for Gemini provider"):
            new_gemini_provider()

    def test_builds_configured_models(self, monkeypatch):
        monkeypatch.setenv("GENAI_API_KEYS", "k1,k2,k3")
        monkeypatch.setenv("GEMINI_MODELS", "gemini-2.5-pro, gemini-2.5-flash")

        models = new_gemini_provider()

        assert sorted(models) == ["gemini-2.5-flash", "gemini-2.5-pro"]
        assert all(model.key_count == 3 for model in models.values())

    def test_count_tokens_needs_no_network(self, monkeypatch):
        monkeypatch.setenv("GENAI_API_KEYS", "k1")

        model = new_gemini_provider()["gemini-2.5-flash"]

        assert model.count_tokens("hello world") == 2
