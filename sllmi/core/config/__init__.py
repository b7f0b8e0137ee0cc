"""Environment-driven configuration for sllmi."""

from sllmi.core.config.config import Config, get_config
from sllmi.core.config.schema import ConfigSchema, EnvVarSpec
from sllmi.core.config.validation import ConfigError, load_env_var, validate_all

__all__ = [
    "Config",
    "ConfigError",
    "ConfigSchema",
    "EnvVarSpec",
    "get_config",
    "load_env_var",
    "validate_all",
]
