"""Base collector interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from vibecard.models import CollectionResult

DEMO_SUBJECT = "demo"


class BaseCollector(ABC):
    """All evidence collectors must implement this interface."""

    platform: str = ""

    @abstractmethod
    async def collect(self, subject: str) -> CollectionResult:
        """Gather public evidence about *subject*.

        Expected upstream failures come back as a failed ``CollectionResult``;
        only programming errors escape.
        """
        ...

    @abstractmethod
    def mock(self) -> CollectionResult:
        """Return the fixed demo bundle without touching the network."""
        ...

    @staticmethod
    def is_demo(subject: str) -> bool:
        return subject.strip().lower() == DEMO_SUBJECT
