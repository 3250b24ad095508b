"""Generation chains: a finished card in, a persona-flavoured artifact out."""

from __future__ import annotations

from vibecard.chains.base import ChainSpec
from vibecard.chains.prompts import (
    CODE_GENERATION_SYSTEM,
    CODE_GENERATION_TEMPLATE,
    DEFAULT_TOPICS,
    WRITING_GENERATION_SYSTEM,
    WRITING_GENERATION_TEMPLATE,
)
from vibecard.chains.schemas import (
    AnalysisResult,
    CodeSample,
    DeveloperVibe,
    GeneratedPost,
    GeneratedPosts,
    HoloIdentity,
    WritingStyle,
)

CODE_FALLBACK = CodeSample(
    code='// TODO: Write actual code\nconsole.log("Hello, World!");',
    language="javascript",
    commit_message="feat: add hello world (revolutionary)",
)

POSTS_FALLBACK = GeneratedPosts(
    posts=[
        GeneratedPost(
            topic=DEFAULT_TOPICS[0],
            content=(
                "Last quarter something I built failed in production.\n\n"
                "The fix took an hour. The lesson took longer: ship smaller.\n\n"
                "What's the smallest thing you shipped this week?"
            ),
        )
    ]
)

CODE_GENERATION: ChainSpec[CodeSample] = ChainSpec(
    name="code-sample",
    system_prompt=CODE_GENERATION_SYSTEM,
    template=CODE_GENERATION_TEMPLATE,
    schema=CodeSample,
    fallback=CODE_FALLBACK,
)

POSTS_GENERATION: ChainSpec[GeneratedPosts] = ChainSpec(
    name="post-writer",
    system_prompt=WRITING_GENERATION_SYSTEM,
    template=WRITING_GENERATION_TEMPLATE,
    schema=GeneratedPosts,
    fallback=POSTS_FALLBACK,
)


def code_variables(result: AnalysisResult) -> dict[str, str]:
    """Persona fields for the code prompt; the trait line is labelled per variant."""
    if isinstance(result, DeveloperVibe):
        style, label, traits = result.commit_style, "Quirks", result.quirks
    elif isinstance(result, HoloIdentity):
        style, label, traits = result.diagnosis, "Tech stack", result.tech_stack
    else:
        style, label, traits = result.diagnosis, "Quirks", []
    return {
        "archetype": result.archetype,
        "style": style or result.personality,
        "trait_label": label,
        "traits": ", ".join(traits) or "none recorded",
    }


def posts_variables(result: WritingStyle) -> dict[str, str]:
    return {
        "archetype": result.archetype,
        "tone": result.tone,
        "style": result.style,
        "keywords": ", ".join(result.keywords) or "none",
        "formatting": result.formatting or "plain paragraphs",
        "topics": "\n".join(f"- {topic}" for topic in DEFAULT_TOPICS),
    }
