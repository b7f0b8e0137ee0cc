"""API key pool with per-call random ordering."""

import hashlib
import random
from collections.abc import Iterable

from sllmi.core.errors import ConfigurationError


def mask_api_key(api_key: str) -> str:
    """Render an API key as a short, non-reversible fingerprint for logs."""
    if not api_key:
        return "<not-set>"
    return "sha256:" + hashlib.sha256(api_key.encode()).hexdigest()[:8] + "..."


class ApiKeyPool:
    """Immutable set of API keys for one provider.

    Responsibilities:
    - Validate that at least one non-blank key is present
    - Produce a fresh uniform shuffle of the keys for every call

    The pool holds no rotation state, so concurrent calls sharing one pool
    need no locking.
    """

    def __init__(self, api_keys: Iterable[str], *, owner: str = "client") -> None:
        """Initialize the pool.

        Args:
            api_keys: The provider's API keys, in configuration order.
            owner: Name used in error messages (usually the model code).

        Raises:
            ConfigurationError: If no keys are given or any key is blank.
        """
        keys = tuple(api_keys)
        if not keys:
            raise ConfigurationError(f"at least one API key is required for {owner}")
        if any(not key or not key.strip() for key in keys):
            raise ConfigurationError(f"blank API key configured for {owner}")
        self._keys = keys
        self._random = random.SystemRandom()

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def keys(self) -> tuple[str, ...]:
        return self._keys

    def shuffled(self) -> list[str]:
        """Return a uniformly shuffled copy of the keys.

        Spreads load across keys so the first configured key is not always
        tried first.
        """
        order = list(self._keys)
        self._random.shuffle(order)
        return order
