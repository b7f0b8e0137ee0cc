"""OpenRouter provider (OpenAI-compatible chat completions).

API keys come from the comma-separated ``OPENROUTER_API_KEYS`` variable.
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
    "top_p": "top_p",
    "top_k": "top_k",
    "output_length": "max_tokens",
}

OPENROUTER_TOKENIZER = EstimatingTokenizer()


def extract_message(response: dict[str, Any]) -> str | None:
    choices = response.get("choices") or []
    if not choices:
        return None
    return (choices[0].get("message") or {}).get("content")


def extract_delta(event: dict[str, Any]) -> str | None:
    choices = event.get("choices") or []
    if not choices:
        return None
    return (choices[0].get("delta") or {}).get("content")


class OpenRouterTransport(HttpTransport):
    provider_label = "OPENROUTER"

    def __init__(self, api_key: str, *, base_url: str, timeout: float | None = None) -> None:
        super().__init__(
            base_url=base_url,
            headers={"authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )

    @staticmethod
    def build_payload(
        model: str, prompt: str, config: GenerationConfig, *, stream: bool
    ) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": stream,
            **config.to_params(GENERATION_CONFIG_NAMES),
        }

    async def send_prompt(self, model: str, prompt: str, config: GenerationConfig) -> str | None:
        response = await self.post_json(
            "/chat/completions", self.build_payload(model, prompt, config, stream=False)
        )
        return extract_message(response)

    async def open_stream(
        self, model: str, prompt: str, config: GenerationConfig
    ) -> AsyncIterator[str | None]:
        async for event in self.stream_events(
            "/chat/completions", self.build_payload(model, prompt, config, stream=True)
        ):
            yield extract_delta(event)


class OpenRouterModel(GenerationClient):
    """An OpenRouter model served by a pool of API keys."""

    provider_name = "openrouter"

    def __init__(
        self,
        model_code: str,
        api_keys: list[str] | tuple[str, ...],
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("tokenizer", OPENROUTER_TOKENIZER)
        super().__init__(model_code, api_keys, **kwargs)
        self.base_url = base_url or get_config().openrouter_base_url
        self.timeout = timeout

    def create_transport(self, api_key: str) -> OpenRouterTransport:
        return OpenRouterTransport(api_key, base_url=self.base_url, timeout=self.timeout)


def new_openrouter_provider() -> dict[str, GenerationClient]:
    """Build every configured OpenRouter model from ``OPENROUTER_API_KEYS``.

    Raises:
        ConfigurationError: If the keys are missing or empty.
    """
    api_keys = load_env_var(ConfigSchema.OPENROUTER_API_KEYS)
    if api_keys is None:
        raise ConfigurationError(
            "OPENROUTER_API_KEYS environment variable not set for OpenRouter provider"
        )
    if not api_keys:
        raise ConfigurationError(
            "OPENROUTER_API_KEYS environment variable is empty for OpenRouter provider"
        )

    return {
        code: OpenRouterModel(code, api_keys)
        for code in load_env_var(ConfigSchema.OPENROUTER_MODELS)
    }


register_provider("openrouter", new_openrouter_provider)
