"""Chat client wrapping litellm, constructed once and injected into chains."""

from __future__ import annotations

import logging
from typing import Protocol

import litellm

from llmkit.config import LLMConfig

logger = logging.getLogger(__name__)


class MissingAPIKeyError(RuntimeError):
    """Raised when an LLM call is attempted without a configured API key."""


class LLMResponseError(RuntimeError):
    """Raised when the provider answers without usable content."""


class ChatModel(Protocol):
    """Anything that can turn a system + user prompt into text."""

    async def complete(self, system: str, user: str) -> str: ...


class LLMClient:
    """Send single-turn chat completions through litellm."""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @property
    def has_api_key(self) -> bool:
        return bool(self.config.api_key)

    async def complete(self, system: str, user: str) -> str:
        if not self.has_api_key:
            raise MissingAPIKeyError(
                f"No API key configured for provider {self.config.provider or 'default'}. "
                "Set WWA_API_KEY or the provider's key variable (e.g. OPENROUTER_API_KEY)."
            )
        kwargs = self.config.to_litellm_kwargs()
        kwargs["messages"] = [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]
        logger.debug("LLM request to %s (%d prompt chars)", self.config.model, len(user))
        response = await litellm.acompletion(**kwargs)
        if not response.choices:
            raise LLMResponseError("LLM returned empty choices list")
        content = response.choices[0].message.content
        if content is None:
            raise LLMResponseError("LLM returned None content (possibly content-filtered)")
        return content


class ReplayClient:
    """Offline chat model answering from canned responses keyed by prompt marker.

    Each key is matched as a substring of the system prompt; the first match
    wins. Unmatched prompts raise ``LLMResponseError`` so that callers fall back
    exactly as they would on a provider failure.
    """

    def __init__(self, responses: dict[str, str]) -> None:
        self._responses = dict(responses)
        self.calls: list[tuple[str, str]] = []

    async def complete(self, system: str, user: str) -> str:
        self.calls.append((system, user))
        for marker, content in self._responses.items():
            if marker in system:
                return content
        raise LLMResponseError("No canned response for this prompt")
