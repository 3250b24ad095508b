"""LLM connection settings shared by every chain."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from llmkit.providers import DEFAULT_PROVIDER, get_provider


@dataclass(frozen=True)
class LLMConfig:
    """LLM connection settings."""

    model: str = "openai/x-ai/grok-4.1-fast"
    api_base: str | None = "https://openrouter.ai/api/v1"
    api_key: str | None = None
    provider: str | None = DEFAULT_PROVIDER
    temperature: float = 0.8
    max_tokens: int = 2048
    timeout: float = 60.0
    extra_headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> LLMConfig:
        """Build config from WWA_* environment variables.

        Falls back to the OpenRouter preset, whose key is read from
        ``OPENROUTER_API_KEY``.
        """
        provider_name = os.getenv("WWA_PROVIDER") or DEFAULT_PROVIDER
        provider = get_provider(provider_name)

        model = os.getenv("WWA_MODEL")
        api_base = os.getenv("WWA_API_BASE")
        api_key = os.getenv("WWA_API_KEY")

        if provider and not model:
            model = provider.default_model
        if provider and not api_base:
            api_base = provider.api_base
        if provider and not api_key:
            api_key = os.getenv(provider.env_key)

        return cls(
            model=model or cls.model,
            api_base=api_base,
            api_key=api_key,
            provider=provider_name,
            temperature=float(os.getenv("WWA_TEMPERATURE", str(cls.temperature))),
        )

    def with_routing_headers(self, referer: str, title: str) -> LLMConfig:
        """Return a copy carrying relay routing headers (OpenRouter style)."""
        provider = get_provider(self.provider) if self.provider else None
        if provider is None or not provider.is_relay:
            return self
        headers = {**self.extra_headers, "HTTP-Referer": referer, "X-Title": title}
        return replace(self, extra_headers=headers)

    def to_litellm_kwargs(self) -> dict[str, object]:
        """Return kwargs suitable for litellm.acompletion()."""
        kwargs: dict[str, object] = {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
        }
        if self.api_base:
            kwargs["api_base"] = self.api_base
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.extra_headers:
            kwargs["extra_headers"] = dict(self.extra_headers)
        return kwargs
