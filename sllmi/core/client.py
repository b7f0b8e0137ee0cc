"""Generation client with API key failover.

A GenerationClient serves one model of one provider with a pool of API keys.
Every call walks a fresh random ordering of the keys:

- a key whose transport or request fails is logged and skipped,
- a successful response without candidate output raises GenerationError at
  once (a content problem, not a key problem),
- if every key fails, GenerationError("all API keys failed: ...") is raised
  with the last failure attached.

Cancellation (asyncio.CancelledError) is never treated as a key failure; it
abandons the current attempt and propagates.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

from sllmi.core.config import get_config
from sllmi.core.errors import ConfigurationError, GenerationError, TokenizationError
from sllmi.core.generation_config import GenerationConfig
from sllmi.core.provider.key_pool import ApiKeyPool, mask_api_key
from sllmi.core.provider.tokenizer import EstimatingTokenizer, Tokenizer
from sllmi.core.provider.transport import ProviderTransport
from sllmi.core.streaming import ChannelClosedError, StreamSession

logger = logging.getLogger(__name__)

ALL_KEYS_FAILED = "all API keys failed"
NO_CONTENT = "no content in response"


class GenerationClient(ABC):
    """Base class for provider-backed models.

    Subclasses only provide ``create_transport``; key rotation, streaming
    and token counting live here. Construction never performs network I/O.
    """

    provider_name = "generic"

    def __init__(
        self,
        model_code: str,
        api_keys: list[str] | tuple[str, ...],
        *,
        tokenizer: Tokenizer | None = None,
        stream_buffer_size: int | None = None,
    ) -> None:
        if not model_code or not model_code.strip():
            raise ConfigurationError(f"model code is required for {self.provider_name} client")
        self.model_code = model_code
        self._keys = ApiKeyPool(api_keys, owner=f"{self.provider_name} model '{model_code}'")
        self._tokenizer: Tokenizer = tokenizer or EstimatingTokenizer()
        self._stream_buffer_size = stream_buffer_size or get_config().stream_buffer_size

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model_code={self.model_code!r}, keys={len(self._keys)})"

    @property
    def key_count(self) -> int:
        return len(self._keys)

    @abstractmethod
    def create_transport(self, api_key: str) -> ProviderTransport:
        """Build a transport authenticated with ``api_key``.

        Must not perform network I/O; connection setup errors surface on
        first use and count as a failure of that key.
        """

    async def generate(self, prompt: str, config: GenerationConfig | None = None) -> str:
        """Generate text for ``prompt``, failing over across API keys.

        Raises:
            GenerationError: The response had no content, or every key failed.
        """
        config = config or GenerationConfig()
        last_error: Exception | None = None

        for attempt, api_key in enumerate(self._keys.shuffled(), start=1):
            start_time = time.monotonic()
            try:
                async with self.create_transport(api_key) as transport:
                    text = await transport.send_prompt(self.model_code, prompt, config)
            except Exception as e:
                last_error = e
                logger.warning(
                    f"{self.model_code}: attempt {attempt}/{len(self._keys)} failed "
                    f"with key {mask_api_key(api_key)}: {e}"
                )
                continue

            if get_config().log_request_metrics:
                duration_ms = (time.monotonic() - start_time) * 1000
                logger.debug(f"{self.model_code}: generated in {duration_ms:.0f}ms")

            if text is None:
                raise GenerationError(NO_CONTENT)
            return text

        logger.error(f"{self.model_code}: {ALL_KEYS_FAILED} ({len(self._keys)} tried)")
        raise GenerationError(f"{ALL_KEYS_FAILED}: {last_error}", cause=last_error) from last_error

    def generate_stream(
        self, prompt: str, config: GenerationConfig | None = None
    ) -> StreamSession:
        """Start a streaming generation and return its session immediately.

        Must be called with a running event loop. Partial chunks from a key
        that fails mid-stream stay delivered; the next key restarts the
        answer from the beginning.
        """
        config = config or GenerationConfig()
        session = StreamSession(self._stream_buffer_size)
        return session.start(lambda s: self._relay(s, prompt, config))

    async def _relay(self, session: StreamSession, prompt: str, config: GenerationConfig) -> None:
        log_extra = {"correlation_id": session.id}
        last_error: Exception | None = None

        for attempt, api_key in enumerate(self._keys.shuffled(), start=1):
            delivered = 0
            try:
                async with self.create_transport(api_key) as transport:
                    async for chunk in transport.open_stream(self.model_code, prompt, config):
                        if chunk:
                            await session.chunks.send(chunk)
                            delivered += 1
            except ChannelClosedError:
                # Consumer cancelled the session
                return
            except Exception as e:
                last_error = e
                logger.warning(
                    f"{self.model_code}: stream attempt {attempt}/{len(self._keys)} failed "
                    f"with key {mask_api_key(api_key)} after {delivered} chunk(s): {e}",
                    extra=log_extra,
                )
                continue

            logger.debug(
                f"{self.model_code}: stream finished with {delivered} chunk(s)", extra=log_extra
            )
            return

        logger.error(f"{self.model_code}: {ALL_KEYS_FAILED} while streaming", extra=log_extra)
        session.fail(GenerationError(f"{ALL_KEYS_FAILED}: {last_error}", cause=last_error))

    def count_tokens(self, prompt: str) -> int:
        """Count tokens in ``prompt``. Needs no API key.

        Raises:
            TokenizationError: The tokenizer failed.
        """
        try:
            return self._tokenizer.count_tokens(prompt)
        except Exception as e:
            raise TokenizationError(f"token counting failed: {e}", cause=e) from e
