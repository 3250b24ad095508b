"""Scout pass: let the model pick the repository and files worth reading."""

from __future__ import annotations

import logging
import re

from llmkit import ChatModel
from vibecard.chains.base import Chain, ChainSpec
from vibecard.chains.prompts import SCOUT_SYSTEM, SCOUT_TEMPLATE
from vibecard.models import MAX_SCOUT_PATHS, EvidenceBundle, ScoutSelection
from vibecard.utils.text import numbered

logger = logging.getLogger(__name__)

# Files that rarely show engineering depth even when the model asks for them.
_LOW_SIGNAL_RE = re.compile(
    r"""(
        \.d\.ts$
      | (^|/)index\.[cm]?[jt]sx?$
      | (^|/)__init__\.py$
      | (^|/)(package(-lock)?\.json|yarn\.lock|pnpm-lock\.yaml|poetry\.lock|Cargo\.lock|go\.sum)$
      | (^|/)(tsconfig|jsconfig)[^/]*\.json$
      | (^|/)[^/]*\.config\.[cm]?[jt]s$
      | (^|/)\.[^/]+$
      | \.(ya?ml|toml|ini|cfg|lock|md|txt)$
    )""",
    re.VERBOSE | re.IGNORECASE,
)

SCOUT_SPEC: ChainSpec[ScoutSelection] = ChainSpec(
    name="scout",
    system_prompt=SCOUT_SYSTEM,
    template=SCOUT_TEMPLATE,
    schema=ScoutSelection,
    fallback=ScoutSelection(),
)


def is_low_signal(path: str) -> bool:
    return bool(_LOW_SIGNAL_RE.search(path))


def describe_repos(bundle: EvidenceBundle) -> str:
    if not bundle.repos:
        return "(none)"
    lines = []
    for repo in bundle.repos:
        langs = ", ".join(repo.languages) or "unknown"
        root = ", ".join(repo.structure[:25]) or "(empty)"
        lines.append(f"- {repo.name}: {repo.description or 'no description'} [{langs}] root: {root}")
    return "\n".join(lines)


class Scout:
    """Run the scout chain and sanitise what it returns."""

    def __init__(self, model: ChatModel) -> None:
        self.chain = Chain(SCOUT_SPEC, model)

    def variables(self, bundle: EvidenceBundle) -> dict[str, str]:
        return {
            "bio": bundle.profile.bio or "(none)",
            "commits": numbered([a.message for a in bundle.activity]),
            "repos": describe_repos(bundle),
        }

    async def select(self, bundle: EvidenceBundle) -> ScoutSelection:
        selection = await self.chain.invoke(self.variables(bundle))
        paths = [p for p in selection.file_paths if not is_low_signal(p)]
        if len(paths) != len(selection.file_paths):
            logger.info("Scout dropped low-signal paths: %s", set(selection.file_paths) - set(paths))
        # At most two paths, counted after filtering.
        return ScoutSelection(selected_repo=selection.selected_repo, file_paths=paths[:MAX_SCOUT_PATHS])
