"""Configuration singleton for sllmi.

Gives direct access to process-wide settings loaded from the environment.
Provider credentials are deliberately absent: each provider factory reads its
own keys when it is invoked, so a missing key surfaces as a
ConfigurationError at registry build time.
"""

from sllmi.core.config.schema import ConfigSchema
from sllmi.core.config.validation import load_env_var


class Config:
    """Configuration singleton with direct access to all settings.

    All values are loaded at initialization time from environment variables
    using schema-based validation.
    """

    def __init__(self) -> None:
        self._log_level: str = load_env_var(ConfigSchema.LOG_LEVEL)
        self._log_request_metrics: bool = load_env_var(ConfigSchema.LOG_REQUEST_METRICS)
        self._request_timeout: int = load_env_var(ConfigSchema.REQUEST_TIMEOUT)
        self._stream_buffer_size: int = load_env_var(ConfigSchema.STREAM_BUFFER_SIZE)
        self._enabled_providers: tuple[str, ...] = load_env_var(ConfigSchema.SLLMI_PROVIDERS)
        self._gemini_base_url: str = load_env_var(ConfigSchema.GEMINI_BASE_URL)
        self._openrouter_base_url: str = load_env_var(ConfigSchema.OPENROUTER_BASE_URL)

    # Logging settings
    @property
    def log_level(self) -> str:
        # Extract just the first word to handle inline comments
        return self._log_level.split()[0].upper()

    @property
    def log_request_metrics(self) -> bool:
        return self._log_request_metrics

    # Transport settings
    @property
    def request_timeout(self) -> int:
        return self._request_timeout

    @property
    def stream_buffer_size(self) -> int:
        return self._stream_buffer_size

    # Provider settings
    @property
    def enabled_providers(self) -> tuple[str, ...]:
        return tuple(name.lower() for name in self._enabled_providers)

    @property
    def gemini_base_url(self) -> str:
        return self._gemini_base_url.rstrip("/")

    @property
    def openrouter_base_url(self) -> str:
        return self._openrouter_base_url.rstrip("/")

    @classmethod
    def reset_singleton(cls) -> None:
        """Reset the global config singleton for test isolation.

        Recreates the config singleton after the test environment has been
        modified. Never call this in production code.
        """
        global config
        config = cls()


# Module-level singleton
config = Config()


def get_config() -> Config:
    """Return the current configuration singleton.

    Prefer this over importing ``config`` directly so that
    ``Config.reset_singleton()`` is observed everywhere.
    """
    return config
