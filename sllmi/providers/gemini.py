"""Google Gemini provider.

Talks to the Generative Language REST API. API keys come from the
comma-separated ``GENAI_API_KEYS`` variable, read when the factory runs.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from sllmi.core.client import GenerationClient
from sllmi.core.config import ConfigSchema, get_config, load_env_var
from sllmi.core.errors import ConfigurationError
from sllmi.core.generation_config import GenerationConfig
from sllmi.core.provider.factory_registry import register_provider
from sllmi.core.provider.tokenizer import EstimatingTokenizer
from sllmi.providers.http import HttpTransport

GENERATION_CONFIG_NAMES = {
    "temperature": "temperature",
    "top_p": "topP",
    "top_k": "topK",
    "output_length": "maxOutputTokens",
}

# One tokenizer for the whole Gemini family; counting needs no key
GEMINI_TOKENIZER = EstimatingTokenizer()


def extract_text(response: dict[str, Any]) -> str | None:
    """Return the first candidate's text, or None if there is no candidate output."""
    candidates = response.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    texts = [part["text"] for part in parts if "text" in part and not part.get("thought")]
    if not texts:
        return None
    return "".join(texts)


class GeminiTransport(HttpTransport):
    provider_label = "GEMINI"

    def __init__(self, api_key: str, *, base_url: str, timeout: float | None = None) -> None:
        super().__init__(base_url=base_url, headers={"x-goog-api-key": api_key}, timeout=timeout)

    @staticmethod
    def build_payload(prompt: str, config: GenerationConfig) -> dict[str, Any]:
        payload: dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        generation_config = config.to_params(GENERATION_CONFIG_NAMES)
        if generation_config:
            payload["generationConfig"] = generation_config
        return payload

    async def send_prompt(self, model: str, prompt: str, config: GenerationConfig) -> str | None:
        response = await self.post_json(
            f"/models/{model}:generateContent", self.build_payload(prompt, config)
        )
        return extract_text(response)

    async def open_stream(
        self, model: str, prompt: str, config: GenerationConfig
    ) -> AsyncIterator[str | None]:
        async for event in self.stream_events(
            f"/models/{model}:streamGenerateContent",
            self.build_payload(prompt, config),
            params={"alt": "sse"},
        ):
            yield extract_text(event)


class GeminiModel(GenerationClient):
    """A Gemini model served by a pool of API keys."""

    provider_name = "gemini"

    def __init__(
        self,
        model_code: str,
        api_keys: list[str] | tuple[str, ...],
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("tokenizer", GEMINI_TOKENIZER)
        super().__init__(model_code, api_keys, **kwargs)
        self.base_url = base_url or get_config().gemini_base_url
        self.timeout = timeout

    def create_transport(self, api_key: str) -> GeminiTransport:
        return GeminiTransport(api_key, base_url=self.base_url, timeout=self.timeout)


def new_gemini_provider() -> dict[str, GenerationClient]:
    """Build every configured Gemini model from ``GENAI_API_KEYS``.

    Raises:
        ConfigurationError: If the keys are missing or empty.
    """
    api_keys = load_env_var(ConfigSchema.GENAI_API_KEYS)
    if api_keys is None:
        raise ConfigurationError(
            "GENAI_API_KEYS environment variable not set for Gemini provider"
        )
    if not api_keys:
        raise ConfigurationError("GENAI_API_KEYS environment variable is empty for Gemini provider")

    models: dict[str, GenerationClient] = {}
    for code in load_env_var(ConfigSchema.GEMINI_MODELS):
        try:
            models[code] = GeminiModel(code, api_keys)
        except ConfigurationError as e:
            raise ConfigurationError(f"failed to create Gemini model '{code}': {e}", cause=e) from e
    return models


register_provider("gemini", new_gemini_provider)
