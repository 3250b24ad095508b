"""A chain is one prompt render, one model call and one parse-or-fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from llmkit import ChatModel, MissingAPIKeyError
from vibecard.chains.parsing import parse_model_output

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class ChainSpec(Generic[T]):
    """Everything that differs between two chains of the same shape."""

    name: str
    system_prompt: str
    template: str
    schema: type[T]
    fallback: T


class Chain(Generic[T]):
    """Render ``spec.template``, ask the model, return a valid ``spec.schema``."""

    def __init__(self, spec: ChainSpec[T], model: ChatModel) -> None:
        self.spec = spec
        self.model = model

    def render(self, variables: dict[str, Any]) -> str:
        return self.spec.template.format(**variables)

    async def invoke(self, variables: dict[str, Any]) -> T:
        result, _ = await self.invoke_with_status(variables)
        return result

    async def invoke_with_status(self, variables: dict[str, Any]) -> tuple[T, bool]:
        """Return ``(result, used_fallback)``."""
        prompt = self.render(variables)
        try:
            content = await self.model.complete(self.spec.system_prompt, prompt)
        except MissingAPIKeyError:
            raise
        except Exception:
            logger.warning("%s chain: model call failed, using fallback", self.spec.name, exc_info=True)
            return self.spec.fallback, True

        outcome = parse_model_output(content, self.spec.schema)
        if not outcome.ok:
            logger.warning("%s chain: %s, using fallback", self.spec.name, outcome.error)
            return self.spec.fallback, True
        return outcome.value, False
