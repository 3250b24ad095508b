"""Analysis chains: evidence bundle in, identity card out."""

from __future__ import annotations

from vibecard.chains.base import ChainSpec
from vibecard.chains.prompts import (
    HOLO_ANALYSIS_SYSTEM,
    HOLO_ANALYSIS_TEMPLATE,
    VIBE_ANALYSIS_SYSTEM,
    VIBE_ANALYSIS_TEMPLATE,
    WRITING_ANALYSIS_SYSTEM,
    WRITING_ANALYSIS_TEMPLATE,
)
from vibecard.chains.schemas import (
    HOLO_ARCHETYPES,
    DeveloperVibe,
    HoloAudit,
    HoloIdentity,
    VibeAudit,
    WritingAudit,
    WritingStyle,
)
from vibecard.models import EvidenceBundle
from vibecard.utils.text import numbered

# ---------------------------------------------------------------------------
# Fallbacks
# ---------------------------------------------------------------------------

WRITING_FALLBACK = WritingStyle(
    archetype="The Quiet Observer",
    tone="Thoughtful",
    style="Measured sentences that let the idea speak louder than the author.",
    personality="Someone who posts rarely but means every word.",
    keywords=["insight", "growth", "team"],
    formatting="Short paragraphs with generous line breaks.",
    audit=WritingAudit(
        hook="Opens with a plain statement rather than a cliffhanger.",
        structure="One idea per post, developed in two or three beats.",
        voice="Calm and sincere.",
    ),
    advice=["Lead with a concrete story.", "End with a question to invite replies."],
    roast="Your posts are so balanced the algorithm can't decide whether to promote them.",
    diagnosis="Chronic understatement with occasional bursts of clarity.",
)

VIBE_FALLBACK = DeveloperVibe(
    archetype="The Mysterious Coder",
    personality=(
        "A developer shrouded in mystery, leaving breadcrumbs of brilliance across the codebase."
    ),
    strengths=["Problem solving", "Persistence", "Adaptability"],
    quirks=["Commits at 3 AM", "Loves refactoring"],
    commit_style="Concise and to the point, like a developer haiku.",
    audit=VibeAudit(
        commit_hygiene="Too little public history to judge.",
        documentation="The READMEs are keeping their secrets.",
    ),
    advice=["Write commit bodies that explain why.", "Pin the repositories you are proud of."],
    roast="Your commit messages are like fortune cookies: vague but oddly inspiring.",
    diagnosis="Stealth mode engineering.",
)

HOLO_FALLBACK = HoloIdentity(
    archetype="The Explorer",
    personality=(
        "Curious and restless, trying ideas across many repositories before settling down. "
        "The evidence is thin, but the footprints point everywhere."
    ),
    tech_stack=[],
    audit=HoloAudit(
        architecture="Not enough public structure to assess.",
        code_quality="No source files could be reviewed.",
    ),
    scores={"complexity": 50, "craftsmanship": 50, "consistency": 50, "curiosity": 75},
    advice=["Publish one project end to end.", "Add a test suite to your favourite repo."],
    roast="Your GitHub is a museum of first commits.",
    diagnosis="Breadth-first engineer awaiting a depth-first project.",
)

WRITING_ANALYSIS: ChainSpec[WritingStyle] = ChainSpec(
    name="writing-analysis",
    system_prompt=WRITING_ANALYSIS_SYSTEM,
    template=WRITING_ANALYSIS_TEMPLATE,
    schema=WritingStyle,
    fallback=WRITING_FALLBACK,
)

VIBE_ANALYSIS: ChainSpec[DeveloperVibe] = ChainSpec(
    name="vibe-analysis",
    system_prompt=VIBE_ANALYSIS_SYSTEM,
    template=VIBE_ANALYSIS_TEMPLATE,
    schema=DeveloperVibe,
    fallback=VIBE_FALLBACK,
)

HOLO_ANALYSIS: ChainSpec[HoloIdentity] = ChainSpec(
    name="holo-audit",
    system_prompt=HOLO_ANALYSIS_SYSTEM,
    template=HOLO_ANALYSIS_TEMPLATE,
    schema=HoloIdentity,
    fallback=HOLO_FALLBACK,
)


# ---------------------------------------------------------------------------
# Template variables
# ---------------------------------------------------------------------------


def _repo_details(bundle: EvidenceBundle) -> str:
    if not bundle.repos:
        return "(none)"
    blocks = []
    for repo in bundle.repos:
        blocks.append(
            "\n".join(
                [
                    f"## {repo.name}: {repo.description or 'no description'}",
                    f"Languages: {', '.join(repo.languages) or 'unknown'}",
                    f"Topics: {', '.join(repo.topics) or 'none'}",
                    f"Structure: {', '.join(repo.structure) or 'empty'}",
                    f"Dependencies: {repo.dependencies or 'none found'}",
                ]
            )
        )
    return "\n\n".join(blocks)


def writing_variables(bundle: EvidenceBundle, evidence_text: str = "") -> dict[str, str]:
    return {
        "name": bundle.profile.name or bundle.profile.username,
        "bio": bundle.profile.bio or "(none)",
        "posts": "\n\n---\n\n".join(bundle.samples) or "(none)",
    }


def vibe_variables(bundle: EvidenceBundle, evidence_text: str = "") -> dict[str, str]:
    stats = bundle.profile.stats
    return {
        "bio": bundle.profile.bio or "(none)",
        "commits": numbered([a.message for a in bundle.activity]),
        "readmes": "\n\n---\n\n".join(bundle.samples) or "(none)",
        "repo_details": _repo_details(bundle),
        "repos": str(stats.repos),
        "followers": str(stats.followers),
        "following": str(stats.following),
    }


def holo_variables(bundle: EvidenceBundle, evidence_text: str = "") -> dict[str, str]:
    stats = bundle.profile.stats
    return {
        "username": bundle.profile.username,
        "bio": bundle.profile.bio or "(none)",
        "repos": str(stats.repos),
        "followers": str(stats.followers),
        "commits": numbered([f"[{a.origin}] {a.message}" for a in bundle.activity]),
        "repo_details": _repo_details(bundle),
        "evidence": evidence_text or "(no source files were retrieved)",
        "archetypes": ", ".join(HOLO_ARCHETYPES),
    }
