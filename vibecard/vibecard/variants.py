"""Product variants: one pipeline, three prompt/schema/presentation bundles."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from vibecard.chains.analysis import (
    HOLO_ANALYSIS,
    VIBE_ANALYSIS,
    WRITING_ANALYSIS,
    holo_variables,
    vibe_variables,
    writing_variables,
)
from vibecard.chains.base import ChainSpec
from vibecard.chains.generation import CODE_GENERATION, POSTS_GENERATION, code_variables, posts_variables
from vibecard.chains.prompts import DEFAULT_TOPICS
from vibecard.chains.scout import SCOUT_SPEC
from vibecard.models import EvidenceBundle


@dataclass(frozen=True)
class Variant:
    """Everything that distinguishes one product from another."""

    name: str
    title: str
    platform: str  # "github" | "linkedin"
    subject_field: str  # legacy request field accepted alongside subjectIdentifier
    require_url: bool
    analysis: ChainSpec[Any]
    analysis_variables: Callable[[EvidenceBundle, str], dict[str, str]]
    generation: ChainSpec[Any]
    generation_variables: Callable[[Any], dict[str, str]]
    use_scout: bool = False
    demo_responses: dict[str, str] = field(default_factory=dict)


def _demo(spec: ChainSpec[Any], payload: dict[str, Any]) -> tuple[str, str]:
    return spec.system_prompt, json.dumps(payload)


WRITING = Variant(
    name="writing",
    title="EchoWrite",
    platform="linkedin",
    subject_field="profileUrl",
    require_url=True,
    analysis=WRITING_ANALYSIS,
    analysis_variables=writing_variables,
    generation=POSTS_GENERATION,
    generation_variables=posts_variables,
    demo_responses=dict(
        [
            _demo(
                WRITING_ANALYSIS,
                {
                    "archetype": "The Humble Bragger",
                    "tone": "Inspirational",
                    "style": "One-line paragraphs building to a lesson and a question.",
                    "personality": "Turns every setback into a keynote.",
                    "keywords": ["Here's what I learned", "Agree?", "ship"],
                    "formatting": "Line break after every sentence, numbered lists, one emoji at the end.",
                    "audit": {
                        "hook": "Opens with a number or a confession.",
                        "structure": "Setup, numbered lessons, call to action.",
                        "voice": "Earnest with a wink.",
                    },
                    "scores": {"authenticity": 62, "clarity": 88, "cringe": 41},
                    "advice": ["Cut the final question once in a while.", "Share one real number."],
                    "roast": "You've learned more lessons than most schools teach.",
                    "diagnosis": "Acute broetry with chronic optimism.",
                },
            ),
            _demo(
                POSTS_GENERATION,
                {
                    "posts": [
                        {
                            "topic": topic,
                            "content": f"{topic}.\n\nHere's what I learned:\n\n1. Start small\n2. Ship anyway\n\nAgree? 👇",
                        }
                        for topic in DEFAULT_TOPICS
                    ]
                },
            ),
        ]
    ),
)

VIBE = Variant(
    name="vibe",
    title="GitHub Vibe Check",
    platform="github",
    subject_field="username",
    require_url=False,
    analysis=VIBE_ANALYSIS,
    analysis_variables=vibe_variables,
    generation=CODE_GENERATION,
    generation_variables=code_variables,
    demo_responses=dict(
        [
            _demo(
                VIBE_ANALYSIS,
                {
                    "archetype": "The Caffeinated Shipper",
                    "personality": "Ships first, apologises in the commit log later.",
                    "strengths": ["Momentum", "Honest commit messages", "Modern stack"],
                    "quirks": ["Narrates feelings in commits", "Dark mode on everything"],
                    "commitStyle": "Conventional prefixes followed by stand-up comedy.",
                    "audit": {
                        "commitHygiene": "Consistent prefixes, small focused commits.",
                        "documentation": "READMEs exist and occasionally tell the truth.",
                    },
                    "scores": {"chaos": 64, "consistency": 71, "documentation": 55},
                    "advice": ["Add tests before the next refactor.", "Pin dependency versions."],
                    "roast": "Your dependency policy is 'latest' and a prayer.",
                    "diagnosis": "Velocity-driven full-stack tinkerer.",
                },
            ),
            _demo(
                CODE_GENERATION,
                {
                    "code": "const theme = 'dark'; // obviously\nexport const ship = () => deploy({ tests: false });",
                    "language": "typescript",
                    "commitMessage": "feat: ship it (tests are a state of mind)",
                },
            ),
        ]
    ),
)

HOLO = Variant(
    name="holo",
    title="Holographic Identity",
    platform="github",
    subject_field="username",
    require_url=False,
    analysis=HOLO_ANALYSIS,
    analysis_variables=holo_variables,
    generation=CODE_GENERATION,
    generation_variables=code_variables,
    use_scout=True,
    demo_responses=dict(
        [
            _demo(
                SCOUT_SPEC,
                {"selectedRepo": "awesome-project", "filePaths": ["lib/engine.ts"]},
            ),
            _demo(
                HOLO_ANALYSIS,
                {
                    "archetype": "The Craftsman",
                    "personality": (
                        "Builds small, sharp tools and polishes them past the point of necessity. "
                        "Prefers a clean boundary to a clever trick."
                    ),
                    "techStack": ["TypeScript", "Next.js", "React"],
                    "audit": {
                        "architecture": "Clear app/components/lib split.",
                        "codeQuality": "Readable, lightly abstracted.",
                        "testing": "No test directory in sight.",
                        "documentation": "Commit messages do the documenting.",
                    },
                    "scores": {"complexity": 58, "craftsmanship": 77, "consistency": 69, "curiosity": 81},
                    "advice": ["Add a tests/ folder.", "Write an architecture note in the README."],
                    "roast": "Your lib/ folder has better boundaries than you do.",
                    "diagnosis": "Product-minded front-end craftsman.",
                },
            ),
            _demo(
                CODE_GENERATION,
                {
                    "code": "export function polish(thing: Thing): Thing {\n  return refine(refine(thing));\n}",
                    "language": "typescript",
                    "commitMessage": "refactor: polish the polish",
                },
            ),
        ]
    ),
)

VARIANTS: dict[str, Variant] = {v.name: v for v in (WRITING, VIBE, HOLO)}


def get_variant(name: str) -> Variant:
    try:
        return VARIANTS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown variant {name!r}; choose from {', '.join(VARIANTS)}") from None
