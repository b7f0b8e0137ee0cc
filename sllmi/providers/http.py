"""Shared httpx plumbing for HTTP/SSE providers."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import AsyncIterator
from typing import Any

import httpx

from sllmi.core.config import get_config
from sllmi.core.errors import ProviderError
from sllmi.core.provider.transport import ProviderTransport

logger = logging.getLogger(__name__)

MAX_ERROR_BODY = 500


def _error_message(response: httpx.Response) -> str:
    """Pull a readable message out of an error response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:MAX_ERROR_BODY] or response.reason_phrase
    if isinstance(payload, list) and payload:
        payload = payload[0]
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return response.text[:MAX_ERROR_BODY]


class HttpTransport(ProviderTransport):
    """ProviderTransport over one ``httpx.AsyncClient``.

    Creating the client performs no I/O; connections open on first request.
    """

    provider_label = "HTTP"

    def __init__(
        self,
        *,
        base_url: str,
        headers: dict[str, str],
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"content-type": "application/json", **headers},
            timeout=timeout if timeout is not None else get_config().request_timeout,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    def _raise_for_response(self, response: httpx.Response) -> None:
        if response.is_error:
            raise ProviderError(
                _error_message(response),
                status_code=response.status_code,
                body=response.text[:MAX_ERROR_BODY],
            )

    async def post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        start_time = time.monotonic()
        if get_config().log_request_metrics:
            logger.debug(f"📤 {self.provider_label} REQUEST | {path}")

        response = await self.client.post(path, json=payload)
        self._raise_for_response(response)
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("malformed JSON response", cause=e) from e

        if get_config().log_request_metrics:
            duration_ms = (time.monotonic() - start_time) * 1000
            logger.debug(f"📥 {self.provider_label} RESPONSE | Duration: {duration_ms:.0f}ms")
        return data

    async def stream_events(
        self,
        path: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """POST ``payload`` and yield each decoded SSE ``data:`` event.

        Ends on stream end or a ``[DONE]`` marker. An event carrying an
        ``error`` object raises ProviderError.
        """
        if get_config().log_request_metrics:
            logger.debug(f"📤 {self.provider_label} STREAM | {path}")

        async with self.client.stream("POST", path, json=payload, params=params) as response:
            if response.is_error:
                await response.aread()
                self._raise_for_response(response)

            async for line in response.aiter_lines():
                line = line.strip()
                # Blank separators and ": keep-alive" comments
                if not line or not line.startswith("data:"):
                    continue
                data = line[len("data:") :].strip()
                if data == "[DONE]":
                    return
                try:
                    event = json.loads(data)
                except json.JSONDecodeError as e:
                    raise ProviderError("malformed stream event", cause=e) from e
                if isinstance(event, dict) and event.get("error"):
                    error = event["error"]
                    message = error.get("message") if isinstance(error, dict) else str(error)
                    code = error.get("code") if isinstance(error, dict) else None
                    raise ProviderError(
                        message or "stream error",
                        status_code=code if isinstance(code, int) else None,
                    )
                yield event
