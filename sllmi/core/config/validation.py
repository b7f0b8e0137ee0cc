"""Type coercion and validation utilities for configuration loading.

This module provides utilities for loading environment variables according
to the ConfigSchema, including automatic type coercion and validation.

Errors are raised with clear messages to help users fix configuration issues.
"""

import os
from typing import Any

from sllmi.core.config.schema import ConfigSchema, EnvVarSpec
from sllmi.core.errors import ConfigurationError


class ConfigError(ConfigurationError):
    """Configuration validation error.

    This exception is raised when an environment variable fails validation
    or cannot be converted to the expected type.

    Attributes:
        env_var: The environment variable name
        value: The raw value that failed validation (hidden for secrets)
        message: Human-readable error message
    """

    def __init__(self, env_var: str, value: str, message: str) -> None:
        self.env_var = env_var
        self.value = value
        super().__init__(f"{env_var}={value}: {message}")
        self.message = message


def _parse_bool(value: str) -> bool:
    """Parse string to boolean.

    Returns:
        True if value is "true", "1", "yes", or "on" (case-insensitive)
        False otherwise
    """
    return value.lower() in ("true", "1", "yes", "on")


def _parse_tuple(value: str) -> tuple[str, ...]:
    """Parse comma-separated string to tuple.

    Args:
        value: Comma-separated string (e.g., "key1,key2,key3")

    Returns:
        Tuple of non-empty, stripped strings
    """
    if not value:
        return ()
    parts = [part.strip() for part in value.split(",")]
    return tuple(part for part in parts if part)


def load_env_var(spec: EnvVarSpec) -> Any:
    """Load and validate a single environment variable.

    This function:
    1. Reads the environment variable
    2. Uses the default if not set
    3. Coerces the string value to the target type
    4. Runs custom validation if provided
    5. Raises ConfigError with clear message if anything fails

    Args:
        spec: Environment variable specification from ConfigSchema

    Returns:
        Validated and coerced value

    Raises:
        ConfigError: If validation fails or type conversion is impossible
    """
    raw_value = os.environ.get(spec.name)

    if raw_value is None:
        return spec.default

    shown_value = "<hidden>" if spec.secret else raw_value

    try:
        if spec.coerce is not None:
            value = spec.coerce(raw_value)
        elif spec.type_hint is bool:
            value = _parse_bool(raw_value)
        elif spec.type_hint is int:
            value = int(raw_value)
        elif spec.type_hint is float:
            value = float(raw_value)
        elif spec.type_hint is tuple:
            value = _parse_tuple(raw_value)
        else:
            value = raw_value
    except (ValueError, TypeError) as e:
        raise ConfigError(
            spec.name,
            shown_value,
            f"Cannot convert to {spec.type_hint.__name__}: {e}",
        ) from e

    if spec.validator is not None:
        try:
            if not spec.validator(value):
                raise ConfigError(
                    spec.name,
                    shown_value,
                    f"Validation failed for type {spec.type_hint.__name__}",
                )
        except (TypeError, ValueError, IndexError) as e:
            # Validator raised an error (e.g., trying to compare None with int)
            raise ConfigError(
                spec.name,
                shown_value,
                f"Validation error: {e}",
            ) from e

    return value


def validate_all() -> list[ConfigError]:
    """Validate all environment variables and return any errors.

    This allows showing all configuration issues at once rather than
    failing on the first one.

    Returns:
        List of ConfigError instances (empty if all valid)
    """
    errors: list[ConfigError] = []
    for spec in ConfigSchema.all_specs().values():
        try:
            load_env_var(spec)
        except ConfigError as e:
            errors.append(e)
    return errors
