"""Hand-authored demo bundles used for the ``demo`` subject and mock mode."""

from __future__ import annotations

from vibecard.models import (
    ActivityRecord,
    DeepEvidence,
    EvidenceBundle,
    FileEvidence,
    ProfileStats,
    ProfileSummary,
    RepoEvidence,
    ScoutSelection,
)

_DEMO_FILES = {
    "lib/engine.ts": (
        "export async function runEngine(input: Input): Promise<Output> {\n"
        "  const plan = buildPlan(input);\n"
        "  for (const step of plan.steps) {\n"
        "    await step.run();\n"
        "  }\n"
        "  return plan.result();\n"
        "}\n"
    ),
}


def mock_github_bundle() -> EvidenceBundle:
    return EvidenceBundle(
        platform="GitHub",
        is_mock=True,
        profile=ProfileSummary(
            username="demo",
            name="Demo Developer",
            bio="Building cool stuff with code",
            avatar_url="https://avatars.githubusercontent.com/u/1?v=4",
            stats=ProfileStats(repos=42, followers=1337, following=69),
        ),
        activity=[
            ActivityRecord(
                message="fix: remove console.log (finally)",
                origin="demo/awesome-project",
                timestamp="2026-01-06",
            ),
            ActivityRecord(
                message="feat: add dark mode because why not",
                origin="demo/cool-app",
                timestamp="2026-01-05",
            ),
            ActivityRecord(
                message="refactor: this code was embarrassing",
                origin="demo/legacy-mess",
                timestamp="2026-01-04",
            ),
            ActivityRecord(
                message="docs: update README with actual instructions",
                origin="demo/awesome-project",
                timestamp="2026-01-03",
            ),
            ActivityRecord(
                message="chore: bump dependencies (pray nothing breaks)",
                origin="demo/cool-app",
                timestamp="2026-01-02",
            ),
        ],
        samples=[
            "# Awesome Project\n\nThis is a revolutionary tool that does something amazing. "
            "Built with love and caffeine.",
            "# Cool App\n\nA minimalist approach to solving complex problems. No bloat, just results.",
        ],
        repos=[
            RepoEvidence(
                name="awesome-project",
                full_name="demo/awesome-project",
                description="A revolutionary tool",
                languages=["TypeScript", "CSS"],
                topics=["ai", "nextjs"],
                structure=["/app", "/components", "/lib", "package.json", "README.md"],
                dependencies=(
                    '"dependencies": { "next": "latest", "react": "latest", '
                    '"lucide-react": "latest" }'
                ),
                stars=128,
            ),
        ],
    )


def mock_linkedin_bundle() -> EvidenceBundle:
    posts = [
        "I got rejected from 47 jobs last year.\n\nHere's what I learned:\n\n"
        "1. Rejection is redirection\n2. Your network is your net worth\n"
        "3. Never stop learning\n\nAgree? 👇",
        "Unpopular opinion: meetings are not work.\n\nThey are the place where work "
        "goes to be discussed, postponed and rescheduled.\n\n#productivity #leadership",
        "Today my team shipped something we've been working on for six months.\n\n"
        "No fancy launch. No press release. Just a quiet deploy on a Tuesday.\n\n"
        "That's how the best things ship. 🚀",
    ]
    return EvidenceBundle(
        platform="LinkedIn",
        is_mock=True,
        profile=ProfileSummary(
            username="demo",
            name="Demo Thought Leader",
            bio="Helping teams ship faster | Speaker | Coffee enthusiast",
            stats=ProfileStats(followers=5400),
        ),
        activity=[
            ActivityRecord(message=post.splitlines()[0], origin="linkedin.com/in/demo")
            for post in posts
        ],
        samples=posts,
    )


def mock_deep_evidence(selection: ScoutSelection) -> DeepEvidence:
    """Canned source files for the demo repository, filtered by *selection*."""
    if selection.is_empty:
        return DeepEvidence()
    files = [
        FileEvidence(path=path, content=_DEMO_FILES[path])
        for path in selection.file_paths
        if path in _DEMO_FILES
    ]
    return DeepEvidence(repo="demo/awesome-project", files=files)
