"""Evidence collectors for vibecard."""

from vibecard.collectors.base import DEMO_SUBJECT, BaseCollector
from vibecard.collectors.github import GitHubCollector
from vibecard.collectors.linkedin import LinkedInCollector

__all__: list[str] = [
    "DEMO_SUBJECT",
    "BaseCollector",
    "GitHubCollector",
    "LinkedInCollector",
]
