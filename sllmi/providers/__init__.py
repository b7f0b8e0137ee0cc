"""Built-in providers.

Importing this package registers every built-in provider factory with the
process-wide registry.
"""

from sllmi.providers import gemini, openrouter  # noqa: F401
from sllmi.providers.gemini import GeminiModel, new_gemini_provider
from sllmi.providers.openrouter import OpenRouterModel, new_openrouter_provider

__all__ = [
    "GeminiModel",
    "OpenRouterModel",
    "new_gemini_provider",
    "new_openrouter_provider",
]
