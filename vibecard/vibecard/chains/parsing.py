"""Turn raw model output into a validated pydantic object without raising."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)

_CODE_FENCE_RE = re.compile(
    r"^\s*```(?:json|JSON)?\s*\n?(.*?)\n?\s*```\s*$",
    re.DOTALL,
)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


@dataclass(frozen=True)
class ParseOutcome(Generic[T]):
    """Tagged result: ``value`` on success, ``error`` otherwise."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None


def strip_code_fences(content: str) -> str:
    """Remove wrapping ```json fences if the model added them."""
    match = _CODE_FENCE_RE.match(content.strip())
    if match:
        return match.group(1).strip()
    return content.strip()


def _load_json_object(text: str) -> dict | None:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Models sometimes wrap the object in prose.
        match = _OBJECT_RE.search(text)
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
    return data if isinstance(data, dict) else None


def parse_model_output(content: str | None, schema: type[T]) -> ParseOutcome[T]:
    """Strip fences, parse JSON and validate against *schema*."""
    if not content or not content.strip():
        return ParseOutcome(error="empty response")

    data = _load_json_object(strip_code_fences(content))
    if data is None:
        return ParseOutcome(error="response is not a JSON object")

    try:
        return ParseOutcome(value=schema.model_validate(data))
    except ValidationError as exc:
        return ParseOutcome(error=f"schema validation failed: {exc.error_count()} error(s)")
