"""Exception hierarchy and error kinds for sllmi.

Every error raised across the public surface inherits from SllmiError, so
callers can catch all library errors with a single except clause, or branch
on the concrete class (or its ``error_type``) without matching messages.

Example:
    >>> try:
    ...     model = registry.get_model("gemini-2.5-pro")
    ...     text = await model.generate("hello")
    ... except GenerationError as e:
    ...     print(f"Generation failed: {e} (cause: {e.cause!r})")
"""

from __future__ import annotations

from enum import Enum


class ErrorType(str, Enum):
    """Error kinds carried by every SllmiError.

    These are stable strings suitable for logs and metrics labels.
    """

    CONFIGURATION = "configuration"  # Missing credentials or model code
    GENERATION = "generation"  # Empty response or every key exhausted
    MODEL_NOT_FOUND = "model_not_found"  # Registry lookup miss
    TOKENIZATION = "tokenization"  # Tokenizer failure
    PROVIDER = "provider"  # Single upstream attempt failed


class SllmiError(Exception):
    """Base exception for all sllmi errors.

    Attributes:
        message: Human-readable explanation
        cause: The underlying exception, if any
    """

    error_type: ErrorType = ErrorType.GENERATION

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, cause={self.cause!r})"


class ConfigurationError(SllmiError):
    """Raised when a client or provider factory is misconfigured.

    Detected eagerly, at construction or factory-build time, never deferred
    to the first request.
    """

    error_type = ErrorType.CONFIGURATION


class GenerationError(SllmiError):
    """Raised when generation cannot produce text.

    Either the provider answered with no candidate output (not retried), or
    every configured API key failed (terminal).
    """

    error_type = ErrorType.GENERATION


class ModelNotFoundError(SllmiError):
    """Raised when a model name is not present in the registry."""

    error_type = ErrorType.MODEL_NOT_FOUND

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name
        super().__init__(f"model not found: {model_name}")


class TokenizationError(SllmiError):
    """Raised when the tokenizer cannot count a prompt."""

    error_type = ErrorType.TOKENIZATION


class ProviderError(SllmiError):
    """Raised by a transport when one upstream attempt fails.

    Generation clients treat this as a per-key failure and move on to the
    next key; it only reaches callers as the ``cause`` of a GenerationError.

    Attributes:
        status_code: HTTP status returned by the provider, if any
        body: Raw response body, truncated for logging
    """

    error_type = ErrorType.PROVIDER

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        if status_code is not None:
            message = f"HTTP {status_code}: {message}"
        super().__init__(message, cause)
