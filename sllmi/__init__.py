"""sllmi

A small resilience layer in front of remote text-generation providers.
Look up a model by name, then generate, stream, or count tokens without
caring which provider or which API key serves the call.
"""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from sllmi.core.errors import (  # noqa: E402
    ConfigurationError,
    ErrorType,
    GenerationError,
    ModelNotFoundError,
    SllmiError,
    TokenizationError,
)
from sllmi.core.generation_config import GenerationConfig  # noqa: E402
from sllmi.registry import ModelRegistry, create_registry  # noqa: E402

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("sllmi")
except PackageNotFoundError:
    # Fallback for source checkouts
    __version__ = "0.3.0"
__author__ = "sllmi"

__all__ = [
    "ConfigurationError",
    "ErrorType",
    "GenerationConfig",
    "GenerationError",
    "ModelNotFoundError",
    "ModelRegistry",
    "SllmiError",
    "TokenizationError",
    "create_registry",
]
