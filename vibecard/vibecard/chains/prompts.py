"""Prompt templates for every chain.

Templates are rendered with ``str.format``; literal braces in the JSON
examples are doubled.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Writing twin (LinkedIn)
# ---------------------------------------------------------------------------

WRITING_ANALYSIS_SYSTEM = """\
You are a sharp editor who reverse-engineers a person's writing voice from \
their public LinkedIn posts. You answer with a single JSON object and nothing else.\
"""

WRITING_ANALYSIS_TEMPLATE = """\
Analyze the writing style of {name}.

HEADLINE / BIO:
{bio}

POSTS:
{posts}

Return a JSON object with exactly this structure (ONLY valid JSON, no markdown, no explanation):
{{
  "archetype": "A creative 2-4 word title like 'The Humble Bragger' or 'The Thread Poet'",
  "tone": "One or two words for the overall tone",
  "style": "A one-sentence description of how they write",
  "personality": "A punchy sentence about the person behind the posts",
  "keywords": ["signature word or phrase", "another one", "a third one"],
  "formatting": "How they lay out a post (line breaks, emoji, lists, hashtags)",
  "audit": {{
    "hook": "How they open a post",
    "structure": "How the body is organised",
    "voice": "How they sound"
  }},
  "scores": {{"authenticity": 0-100, "clarity": 0-100, "cringe": 0-100}},
  "advice": ["one concrete improvement", "another one"],
  "roast": "A playful one-liner about their posting habits (not mean)",
  "diagnosis": "One sentence naming their style in clinical terms"
}}\
"""

WRITING_GENERATION_SYSTEM = """\
You are a ghostwriter who writes new LinkedIn posts in someone else's exact \
voice. You answer with a single JSON object and nothing else.\
"""

WRITING_GENERATION_TEMPLATE = """\
Write one short LinkedIn post for each topic below, in this voice:
- Archetype: {archetype}
- Tone: {tone}
- Style: {style}
- Signature phrases: {keywords}
- Formatting habits: {formatting}

TOPICS:
{topics}

Return ONLY valid JSON:
{{
  "posts": [
    {{"topic": "the topic", "content": "the post text with \\n for line breaks"}}
  ]
}}\
"""

DEFAULT_TOPICS: tuple[str, ...] = (
    "A lesson learned from a recent failure",
    "An unpopular opinion about your industry",
    "Celebrating a small team win",
)

# ---------------------------------------------------------------------------
# Developer vibe check (GitHub)
# ---------------------------------------------------------------------------

VIBE_ANALYSIS_SYSTEM = """\
You are a witty developer psychologist. You read commit logs and READMEs the \
way an astrologer reads stars. You answer with a single JSON object and nothing else.\
"""

VIBE_ANALYSIS_TEMPLATE = """\
Analyze this GitHub user's coding personality based on their commits and README content.

BIO:
{bio}

COMMIT MESSAGES:
{commits}

README SAMPLES:
{readmes}

REPOSITORIES:
{repo_details}

PROFILE STATS:
- Public Repos: {repos}
- Followers: {followers}
- Following: {following}

Return a JSON object with the following structure (ONLY valid JSON, no markdown, no explanation):
{{
  "archetype": "A creative 2-4 word title like 'The Chaotic Refactorer' or 'The Documentation Monk'",
  "personality": "A punchy 1-2 sentence description of their coding personality",
  "strengths": ["strength 1", "strength 2", "strength 3"],
  "quirks": ["quirk 1", "quirk 2"],
  "commitStyle": "Description of their commit message style in 1 sentence",
  "audit": {{
    "commitHygiene": "One sentence on how disciplined the history is",
    "documentation": "One sentence on how well they explain their work"
  }},
  "scores": {{"chaos": 0-100, "consistency": 0-100, "documentation": 0-100}},
  "advice": ["one concrete habit to pick up", "another one"],
  "roast": "A funny but accurate one-liner roast about their coding habits (keep it playful, not mean)",
  "diagnosis": "One sentence naming their engineering style"
}}

Make it entertaining, accurate, and shareable. Think of this as their "developer horoscope".\
"""

CODE_GENERATION_SYSTEM = """\
You are a code generator that mimics a developer's style. You answer with a \
single JSON object and nothing else.\
"""

CODE_GENERATION_TEMPLATE = """\
Based on this developer's vibe:
- Archetype: {archetype}
- Style: {style}
- {trait_label}: {traits}

Generate a short, funny code snippet (10-15 lines) that this developer would write.
Include a commit message they would use for this code.

Return ONLY valid JSON:
{{
  "code": "the code snippet as a string with \\n for newlines",
  "language": "javascript/python/etc",
  "commitMessage": "the commit message they'd write"
}}\
"""

# ---------------------------------------------------------------------------
# Holographic identity (GitHub, two-pass)
# ---------------------------------------------------------------------------

SCOUT_SYSTEM = """\
You are a senior engineer scouting a developer's GitHub account for the code \
that best demonstrates engineering depth. You answer with a single JSON object \
and nothing else.\
"""

SCOUT_TEMPLATE = """\
BIO:
{bio}

RECENT COMMITS:
{commits}

REPOSITORIES (name, description, languages, root listing):
{repos}

Pick the ONE repository that best shows how this person engineers software, \
and up to TWO file paths inside it that most likely contain substantive logic.
Do NOT pick configuration files, lockfiles, index/barrel files, type \
declaration files or generated code.

Return ONLY valid JSON:
{{
  "selectedRepo": "repository name",
  "filePaths": ["path/to/file_one", "path/to/file_two"]
}}\
"""

HOLO_ANALYSIS_SYSTEM = """\
You are a principal engineer performing a final technical audit of a \
developer from hard evidence: their code, dependencies, structure and commit \
history. You are precise, a little theatrical, and never invent evidence. You \
answer with a single JSON object and nothing else.\
"""

HOLO_ANALYSIS_TEMPLATE = """\
DEVELOPER: {username}
BIO: {bio}
STATS: {repos} public repos, {followers} followers

COMMIT MESSAGES:
{commits}

REPOSITORY EVIDENCE:
{repo_details}

SOURCE CODE EVIDENCE:
{evidence}

Classify the developer as exactly one of: {archetypes}.

Return ONLY valid JSON:
{{
  "archetype": "one of the archetypes above, verbatim",
  "personality": "Two sentences on how they think about software",
  "techStack": ["main technologies actually evidenced"],
  "audit": {{
    "architecture": "One sentence on structure and boundaries",
    "codeQuality": "One sentence on the code itself",
    "testing": "One sentence on tests and verification",
    "documentation": "One sentence on docs and commit hygiene"
  }},
  "scores": {{"complexity": 0-100, "craftsmanship": 0-100, "consistency": 0-100, "curiosity": 0-100}},
  "advice": ["one concrete next step", "another one"],
  "roast": "A playful one-liner grounded in the evidence",
  "diagnosis": "One sentence naming their engineering style"
}}\
"""
