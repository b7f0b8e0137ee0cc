"""Provider plumbing shared by every concrete provider.

- ProviderFactoryRegistry: Process-wide list of provider factories
- ApiKeyPool: Validated API keys with per-call shuffling
- ProviderTransport: Send-prompt / open-stream capability boundary
- Tokenizer: Credential-free token counting capability
"""

from sllmi.core.provider.factory_registry import (
    ProviderFactory,
    ProviderFactoryRegistry,
    provider_factories,
    register_provider,
)
from sllmi.core.provider.key_pool import ApiKeyPool, mask_api_key
from sllmi.core.provider.tokenizer import EstimatingTokenizer, Tokenizer
from sllmi.core.provider.transport import ProviderTransport

__all__ = [
    "ApiKeyPool",
    "EstimatingTokenizer",
    "ProviderFactory",
    "ProviderFactoryRegistry",
    "ProviderTransport",
    "Tokenizer",
    "mask_api_key",
    "provider_factories",
    "register_provider",
]
