"""Model registry: one name -> client mapping across every provider."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping

from sllmi.core.client import GenerationClient
from sllmi.core.config import get_config
from sllmi.core.errors import ModelNotFoundError
from sllmi.core.provider.factory_registry import (
    ProviderFactory,
    ProviderFactoryRegistry,
    build_models,
    provider_factories,
)

logger = logging.getLogger(__name__)

BUILTIN_PROVIDERS_MODULE = "sllmi.providers"


class ModelRegistry:
    """Read-only lookup of generation clients by model name.

    Built once at startup; lives for the process lifetime. Clients hold no
    resources that need explicit release.
    """

    def __init__(self, models: Mapping[str, GenerationClient]) -> None:
        self._models: dict[str, GenerationClient] = dict(models)

    def get_model(self, name: str) -> GenerationClient:
        """Return the client registered under exactly ``name``.

        Raises:
            ModelNotFoundError: If no such model is registered.
        """
        try:
            return self._models[name]
        except KeyError:
            raise ModelNotFoundError(name) from None

    def list_models(self) -> list[str]:
        """Return every registered model name. Order is unspecified."""
        return list(self._models)

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self) -> Iterator[str]:
        return iter(self._models)


def create_registry(
    factories: Iterable[ProviderFactory | tuple[str, ProviderFactory]] | None = None,
    *,
    enabled: Iterable[str] | None = None,
    factory_registry: ProviderFactoryRegistry | None = None,
) -> ModelRegistry:
    """Build a ModelRegistry.

    Args:
        factories: Explicit factories (or ``(name, factory)`` pairs) to build
            in order. When given, the process-wide registry is not used.
        enabled: Provider names to build from the factory registry. Defaults
            to the ``SLLMI_PROVIDERS`` setting.
        factory_registry: Registry to build from. Defaults to the process-wide
            one, after importing the built-in providers.

    Raises:
        ConfigurationError: If any factory fails; the first failure wins.
    """
    if factories is not None:
        models = build_models(_named(factories))
    else:
        if factory_registry is None:
            importlib.import_module(BUILTIN_PROVIDERS_MODULE)
            factory_registry = provider_factories
        if enabled is None:
            enabled = get_config().enabled_providers
        models = factory_registry.build_all(enabled)

    logger.info(f"Model registry ready with {len(models)} model(s)")
    return ModelRegistry(models)


def _named(
    factories: Iterable[ProviderFactory | tuple[str, ProviderFactory]],
) -> list[tuple[str, ProviderFactory]]:
    named: list[tuple[str, ProviderFactory]] = []
    for factory in factories:
        if isinstance(factory, tuple):
            named.append(factory)
        else:
            named.append((_factory_name(factory), factory))
    return named


def _factory_name(factory: Callable[..., object]) -> str:
    return getattr(factory, "__name__", type(factory).__name__)
