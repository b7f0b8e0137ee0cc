"""Process-wide registry of provider factories.

Provider modules register a factory when they are imported; the model
registry builds every factory once at startup. Adding a provider means
writing a factory and registering it, not editing the registry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from sllmi.core.errors import ConfigurationError

if TYPE_CHECKING:
    from sllmi.core.client import GenerationClient

ProviderFactory = Callable[[], "dict[str, GenerationClient]"]

logger = logging.getLogger(__name__)


class ProviderFactoryRegistry:
    """Ordered list of named provider factories.

    Responsibilities:
    - Record factories in registration order
    - Refuse registration once the factories have been built
    - Invoke factories and merge their model mappings, failing fast

    Factories are opaque: the registry does not retry, memoize or validate
    their output beyond rejecting a missing mapping.
    """

    def __init__(self) -> None:
        """Initialize an empty factory registry."""
        self._factories: list[tuple[str, ProviderFactory]] = []
        self._built = False
        self._lock = threading.Lock()

    def register(self, name: str, factory: ProviderFactory) -> None:
        """Register a provider factory.

        Args:
            name: Provider name (e.g., "gemini"), unique within the registry.
            factory: Zero-argument callable returning model name -> client.

        Raises:
            RuntimeError: If build_all() has already run.
            ValueError: If the provider name is already registered.
        """
        name = name.lower()
        with self._lock:
            if self._built:
                raise RuntimeError(
                    f"cannot register provider '{name}': factories were already built"
                )
            if any(existing == name for existing, _ in self._factories):
                raise ValueError(f"provider '{name}' is already registered")
            self._factories.append((name, factory))
        logger.debug(f"Registered provider factory '{name}'")

    def names(self) -> list[str]:
        """Return registered provider names in registration order."""
        with self._lock:
            return [name for name, _ in self._factories]

    def build_all(self, enabled: Iterable[str] | None = None) -> dict[str, GenerationClient]:
        """Invoke registered factories in order and merge their models.

        Args:
            enabled: Provider names to build. None builds every factory.

        Returns:
            Mapping of model name to client across all built providers.

        Raises:
            ConfigurationError: If a factory fails or returns no mapping, or
                an enabled provider is not registered.
        """
        with self._lock:
            self._built = True
            factories = list(self._factories)

        if enabled is not None:
            wanted = [name.lower() for name in enabled]
            known = {name for name, _ in factories}
            unknown = [name for name in wanted if name not in known]
            if unknown:
                raise ConfigurationError(
                    f"unknown provider(s): {', '.join(unknown)} "
                    f"(registered: {', '.join(sorted(known)) or 'none'})"
                )
            factories = [(name, factory) for name, factory in factories if name in wanted]

        return build_models(factories)

    def reset(self) -> None:
        """Forget every factory and allow registration again.

        This is primarily useful for testing.
        """
        with self._lock:
            self._factories.clear()
            self._built = False


def build_models(
    factories: Iterable[tuple[str, ProviderFactory]],
) -> dict[str, GenerationClient]:
    """Invoke ``(name, factory)`` pairs in order and merge their mappings."""
    models: dict[str, GenerationClient] = {}
    for name, factory in factories:
        built = factory()
        if built is None:
            raise ConfigurationError(f"provider factory '{name}' returned no models")
        for model_name, client in built.items():
            if model_name in models:
                logger.warning(
                    f"Model '{model_name}' from provider '{name}' replaces an earlier registration"
                )
            models[model_name] = client
        logger.info(f"Provider '{name}' built {len(built)} model(s)")
    return models


# Process-wide registry populated by provider modules at import time
provider_factories = ProviderFactoryRegistry()


def register_provider(name: str, factory: ProviderFactory) -> None:
    """Register ``factory`` with the process-wide registry."""
    provider_factories.register(name, factory)
