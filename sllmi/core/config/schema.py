"""Declarative schema for environment variable configuration.

This module provides a single source of truth for all environment variables,
including automatic type coercion, validation, and documentation.

Credential variables are declared here too, but they are read by the provider
factories at build time, not by the Config singleton at import time.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EnvVarSpec:
    """Specification for a single environment variable.

    Attributes:
        name: Environment variable name (e.g., "LOG_LEVEL")
        default: Default value if env var not set
        type_hint: Type for validation (int, str, float, bool, tuple)
        description: Human-readable description for docs
        validator: Optional custom validation function
        coerce: Optional function to convert string to target type
        secret: Whether the value must be masked when displayed
    """

    name: str
    default: Any
    type_hint: type
    description: str
    validator: Callable[[Any], bool] | None = None
    coerce: Callable[[str], Any] | None = None
    secret: bool = False


class ConfigSchema:
    """Registry of all configuration environment variables."""

    # === Logging ===

    LOG_LEVEL = EnvVarSpec(
        name="LOG_LEVEL",
        default="INFO",
        type_hint=str,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        validator=lambda x: bool(x.split())
        and x.split()[0].upper() in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )

    LOG_REQUEST_METRICS = EnvVarSpec(
        name="LOG_REQUEST_METRICS",
        default=False,
        type_hint=bool,
        description="Log per-request timing at DEBUG level",
    )

    # === Transport ===

    REQUEST_TIMEOUT = EnvVarSpec(
        name="REQUEST_TIMEOUT",
        default=90,
        type_hint=int,
        description="HTTP timeout in seconds for a single provider attempt",
        validator=lambda x: x > 0,
    )

    STREAM_BUFFER_SIZE = EnvVarSpec(
        name="STREAM_BUFFER_SIZE",
        default=16,
        type_hint=int,
        description="Chunks buffered per streaming call before the producer waits",
        validator=lambda x: x > 0,
    )

    # === Providers ===

    SLLMI_PROVIDERS = EnvVarSpec(
        name="SLLMI_PROVIDERS",
        default=("gemini",),
        type_hint=tuple,
        description="Comma-separated provider names built by the default registry",
        validator=lambda x: len(x) > 0,
    )

    GENAI_API_KEYS = EnvVarSpec(
        name="GENAI_API_KEYS",
        default=None,
        type_hint=tuple,
        description="Comma-separated Gemini API keys",
        secret=True,
    )

    GEMINI_BASE_URL = EnvVarSpec(
        name="GEMINI_BASE_URL",
        default="https://generativelanguage.googleapis.com/v1beta",
        type_hint=str,
        description="Gemini REST API base URL",
    )

    GEMINI_MODELS = EnvVarSpec(
        name="GEMINI_MODELS",
        default=(
            "gemini-2.5-pro",
            "gemini-2.5-flash",
            "gemini-2.5-flash-lite",
            "gemini-2.0-flash",
            "gemini-2.0-flash-lite",
            "gemma-3-27b-it",
        ),
        type_hint=tuple,
        description="Comma-separated Gemini model codes to register",
        validator=lambda x: len(x) > 0,
    )

    OPENROUTER_API_KEYS = EnvVarSpec(
        name="OPENROUTER_API_KEYS",
        default=None,
        type_hint=tuple,
        description="Comma-separated OpenRouter API keys",
        secret=True,
    )

    OPENROUTER_BASE_URL = EnvVarSpec(
        name="OPENROUTER_BASE_URL",
        default="https://openrouter.ai/api/v1",
        type_hint=str,
        description="OpenRouter API base URL",
    )

    OPENROUTER_MODELS = EnvVarSpec(
        name="OPENROUTER_MODELS",
        default=("z-ai/glm-4.5-air:free",),
        type_hint=tuple,
        description="Comma-separated OpenRouter model slugs to register",
        validator=lambda x: len(x) > 0,
    )

    @classmethod
    def all_specs(cls) -> dict[str, EnvVarSpec]:
        """Get all environment variable specifications.

        Returns:
            Dictionary mapping spec names to EnvVarSpec objects
        """
        return {
            name: getattr(cls, name)
            for name in dir(cls)
            if isinstance(getattr(cls, name), EnvVarSpec)
        }
