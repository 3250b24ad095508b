"""llmkit: shared LLM configuration, provider presets and chat client."""

from llmkit.client import ChatModel, LLMClient, LLMResponseError, MissingAPIKeyError, ReplayClient
from llmkit.config import LLMConfig
from llmkit.providers import PROVIDERS, ProviderInfo, get_provider, list_providers

__all__ = [
    "ChatModel",
    "LLMClient",
    "LLMConfig",
    "LLMResponseError",
    "MissingAPIKeyError",
    "PROVIDERS",
    "ProviderInfo",
    "ReplayClient",
    "get_provider",
    "list_providers",
]
