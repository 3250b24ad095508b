"""Provider registry: base URLs, key variables and default models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderInfo:
    """Metadata for an LLM provider."""

    name: str
    api_base: str | None  # None = use litellm default
    env_key: str  # environment variable for the API key
    default_model: str
    is_relay: bool = False  # relays accept HTTP-Referer / X-Title routing headers


_OPENAI = ProviderInfo(
    name="openai",
    api_base=None,
    env_key="OPENAI_API_KEY",
    default_model="openai/gpt-4o-mini",
)

_ANTHROPIC = ProviderInfo(
    name="anthropic",
    api_base=None,
    env_key="ANTHROPIC_API_KEY",
    default_model="anthropic/claude-sonnet-4-5-20250929",
)

_GOOGLE = ProviderInfo(
    name="google",
    api_base=None,
    env_key="GEMINI_API_KEY",
    default_model="gemini/gemini-2.0-flash",
)

_DEEPSEEK = ProviderInfo(
    name="deepseek",
    api_base="https://api.deepseek.com/v1",
    env_key="DEEPSEEK_API_KEY",
    default_model="openai/deepseek-chat",
)

_OPENROUTER = ProviderInfo(
    name="openrouter",
    api_base="https://openrouter.ai/api/v1",
    env_key="OPENROUTER_API_KEY",
    default_model="openai/x-ai/grok-4.1-fast",
    is_relay=True,
)

DEFAULT_PROVIDER = "openrouter"

PROVIDERS: dict[str, ProviderInfo] = {
    p.name: p for p in [_OPENAI, _ANTHROPIC, _GOOGLE, _DEEPSEEK, _OPENROUTER]
}


def get_provider(name: str) -> ProviderInfo | None:
    """Look up a provider by name (case-insensitive)."""
    return PROVIDERS.get(name.lower())


def list_providers() -> list[str]:
    """Return all registered provider names."""
    return list(PROVIDERS.keys())
