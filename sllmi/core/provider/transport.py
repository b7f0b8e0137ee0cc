"""Capability boundary between generation clients and provider wire protocols."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from sllmi.core.generation_config import GenerationConfig


class ProviderTransport(ABC):
    """One authenticated connection to a provider, bound to a single API key.

    Generation clients open a transport per attempt and close it when the
    attempt ends. Implementations raise ProviderError (or any other
    Exception) on failure; the client decides whether to try another key.
    """

    @abstractmethod
    async def send_prompt(
        self, model: str, prompt: str, config: GenerationConfig
    ) -> str | None:
        """Run one non-streaming generation.

        Returns:
            The generated text, or None when the response carries no
            candidate output.
        """

    @abstractmethod
    def open_stream(
        self, model: str, prompt: str, config: GenerationConfig
    ) -> AsyncIterator[str | None]:
        """Run one streaming generation, yielding text per chunk.

        Chunks without candidate output are yielded as None. The iterator
        ends cleanly when the provider finishes and raises on failure.
        """

    async def aclose(self) -> None:
        return None

    async def __aenter__(self) -> ProviderTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
