"""RESPX-based HTTP mocking fixtures for testing.

This module provides reusable fixtures for mocking the Gemini and
OpenRouter HTTP APIs using RESPX.
"""

import json

import httpx
import pytest
import respx

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


# === Gemini Response Fixtures ===


@pytest.fixture
def gemini_generate_response():
    """Standard Gemini generateContent response."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": "The sea is wide."}]},
                "finishReason": "STOP",
                "index": 0,
            }
        ],
        "usageMetadata": {"promptTokenCount": 5, "candidatesTokenCount": 5, "totalTokenCount": 10},
    }


@pytest.fixture
def gemini_blocked_response():
    """Gemini response for a prompt blocked by safety filters: no candidates."""
    return {
        "promptFeedback": {"blockReason": "SAFETY"},
        "usageMetadata": {"promptTokenCount": 5, "totalTokenCount": 5},
    }


@pytest.fixture
def gemini_streaming_chunks():
    """Gemini streamGenerateContent?alt=sse chunks."""
    return [
        sse_event({"candidates": [{"content": {"role": "model", "parts": [{"text": "The sea "}]}}]}),
        sse_event({"candidates": [{"content": {"role": "model", "parts": [{"text": "is wide."}]}}]}),
        sse_event(
            {
                "candidates": [
                    {"content": {"role": "model", "parts": []}, "finishReason": "STOP"}
                ],
                "usageMetadata": {"totalTokenCount": 10},
            }
        ),
    ]


# === OpenRouter Response Fixtures ===


@pytest.fixture
def openrouter_chat_completion():
    """Standard OpenAI-compatible chat completion response."""
    return {
        "id": "gen-123",
        "object": "chat.completion",
        "model": "z-ai/glm-4.5-air:free",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Hello! How can I help you today?"},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 9, "total_tokens": 19},
    }


@pytest.fixture
def openrouter_streaming_chunks():
    """OpenAI-compatible streaming chunks, including an OpenRouter keep-alive comment."""
    return [
        b": OPENROUTER PROCESSING\n\n",
        sse_event({"choices": [{"index": 0, "delta": {"role": "assistant", "content": ""}}]}),
        sse_event({"choices": [{"index": 0, "delta": {"content": "Hello"}}]}),
        sse_event({"choices": [{"index": 0, "delta": {"content": "!"}}]}),
        sse_event({"choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}]}),
        b"data: [DONE]\n\n",
    ]


@pytest.fixture
def mock_gemini_api():
    """Mock Gemini API endpoints with RESPX.

    Example:
        def test_generate(mock_gemini_api, gemini_generate_response):
            mock_gemini_api.post("/models/gemini-2.5-flash:generateContent").mock(
                return_value=httpx.Response(200, json=gemini_generate_response)
            )
    """
    with respx.mock(base_url=GEMINI_BASE_URL) as respx_mock:
        yield respx_mock


@pytest.fixture
def mock_openrouter_api():
    """Mock OpenRouter API endpoints with RESPX."""
    with respx.mock(base_url=OPENROUTER_BASE_URL) as respx_mock:
        yield respx_mock


# === Helper Functions ===


def sse_event(payload: dict) -> bytes:
    """Encode one server-sent event carrying ``payload`` as JSON."""
    return f"data: {json.dumps(payload)}\n\n".encode()


def create_gemini_error(status_code: int, status: str, message: str) -> dict:
    """Create a Google API formatted error body.

    Args:
        status_code: HTTP status code
        status: Canonical status (e.g., "INVALID_ARGUMENT")
        message: Error message
    """
    return {"error": {"code": status_code, "message": message, "status": status}}


def create_streaming_response(chunks: list[bytes]) -> httpx.Response:
    """Create a streaming HTTP response from chunks.

    Args:
        chunks: List of byte chunks to stream

    Returns:
        httpx.Response configured for server-sent events
    """
    return httpx.Response(
        status_code=200,
        headers={"content-type": "text/event-stream"},
        content=b"".join(chunks),
    )
