"""Result schemas the chains validate model output against.

Only the identity fields (archetype, personality, tone, style, generated
content) are strict. Everything else is coerced or dropped so that one sloppy
optional field never discards an otherwise usable answer.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, get_args

from pydantic import BaseModel, BeforeValidator, Field, StringConstraints

from vibecard.models import CardModel

Score = Annotated[int, Field(ge=0, le=100)]
NonEmpty = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _lenient_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _lenient_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    items = (_lenient_text(item) for item in value)
    return [item for item in items if item]


def _lenient_scores(value: Any) -> dict[str, int]:
    if not isinstance(value, dict):
        return {}
    scores: dict[str, int] = {}
    for name, raw in value.items():
        if isinstance(raw, str):
            try:
                raw = float(raw.strip().rstrip("%"))
            except ValueError:
                continue
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            continue
        scores[str(name)] = min(100, max(0, round(raw)))
    return scores


def _lenient_object(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else {}


Text = Annotated[str, BeforeValidator(_lenient_text)]
TextList = Annotated[list[str], BeforeValidator(_lenient_list)]
Scores = Annotated[dict[str, Score], BeforeValidator(_lenient_scores)]


class AnalysisResult(CardModel):
    """Fields every identity card carries regardless of variant."""

    archetype: NonEmpty
    personality: NonEmpty
    scores: Scores = Field(default_factory=dict)
    advice: TextList = Field(default_factory=list)
    roast: Text = ""
    diagnosis: Text = ""


# --- writing twin ---


class WritingAudit(CardModel):
    hook: Text = ""
    structure: Text = ""
    voice: Text = ""


class WritingStyle(AnalysisResult):
    personality: Text = ""
    tone: NonEmpty
    style: NonEmpty
    keywords: TextList = Field(default_factory=list)
    formatting: Text = ""
    audit: Annotated[WritingAudit, BeforeValidator(_lenient_object)] = Field(default_factory=WritingAudit)


# --- developer vibe check ---


class VibeAudit(CardModel):
    commit_hygiene: Text = ""
    documentation: Text = ""


class DeveloperVibe(AnalysisResult):
    strengths: TextList = Field(default_factory=list)
    quirks: TextList = Field(default_factory=list)
    commit_style: Text = ""
    audit: Annotated[VibeAudit, BeforeValidator(_lenient_object)] = Field(default_factory=VibeAudit)


# --- holographic identity ---

HoloArchetype = Literal[
    "The Architect",
    "The Craftsman",
    "The Hacker",
    "The Explorer",
    "The Optimizer",
    "The Maintainer",
]

HOLO_ARCHETYPES: tuple[str, ...] = get_args(HoloArchetype)


class HoloAudit(CardModel):
    architecture: Text = ""
    code_quality: Text = ""
    testing: Text = ""
    documentation: Text = ""


class HoloIdentity(AnalysisResult):
    archetype: HoloArchetype
    tech_stack: TextList = Field(default_factory=list)
    audit: Annotated[HoloAudit, BeforeValidator(_lenient_object)] = Field(default_factory=HoloAudit)


# --- generated artifacts ---


class CodeSample(CardModel):
    """Short code blob plus the commit message the persona would write."""

    code: NonEmpty
    language: NonEmpty
    commit_message: NonEmpty


class GeneratedPost(CardModel):
    topic: Text = ""
    content: NonEmpty


class GeneratedPosts(CardModel):
    posts: list[GeneratedPost] = Field(min_length=1)
