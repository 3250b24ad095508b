"""Core data models for vibecard.

Every model is frozen and request-scoped. Models serialise with camelCase
aliases because the HTTP payloads are consumed by a JavaScript front end.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Uniform truncation caps applied at collection time.
README_CHAR_CAP = 500
README_MIN_CHARS = 50
DEPENDENCY_CHAR_CAP = 1500
POST_MIN_CHARS = 50
POST_CHAR_CAP = 1500
MAX_LANGUAGES = 3
MAX_TOPICS = 10
MAX_SCOUT_PATHS = 2


class CardModel(BaseModel):
    """Base for every payload model."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Evidence
# ---------------------------------------------------------------------------


class ProfileStats(CardModel):
    repos: int = Field(default=0, ge=0)
    followers: int = Field(default=0, ge=0)
    following: int = Field(default=0, ge=0)


class ProfileSummary(CardModel):
    """Public profile metadata of the subject."""

    username: str = Field(min_length=1)
    name: str = ""
    bio: str = ""
    avatar_url: str = ""
    stats: ProfileStats = Field(default_factory=ProfileStats)


class ActivityRecord(CardModel):
    """A commit or a post: first-line message plus where it came from."""

    message: str
    origin: str = ""
    timestamp: str | None = None

    @field_validator("message")
    @classmethod
    def _non_empty_message(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("activity message must not be empty")
        return value


class RepoEvidence(CardModel):
    """Structural evidence about one repository."""

    name: str
    full_name: str = ""
    description: str = ""
    languages: list[str] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)
    structure: list[str] = Field(default_factory=list)
    dependencies: str = ""
    stars: int = 0

    @field_validator("languages")
    @classmethod
    def _cap_languages(cls, value: list[str]) -> list[str]:
        return value[:MAX_LANGUAGES]

    @field_validator("topics")
    @classmethod
    def _cap_topics(cls, value: list[str]) -> list[str]:
        return value[:MAX_TOPICS]

    @field_validator("dependencies")
    @classmethod
    def _cap_dependencies(cls, value: str) -> str:
        return value[:DEPENDENCY_CHAR_CAP]


class EvidenceBundle(CardModel):
    """Everything gathered about the subject before any LLM call."""

    platform: str
    profile: ProfileSummary
    activity: list[ActivityRecord] = Field(default_factory=list)
    samples: list[str] = Field(default_factory=list)
    repos: list[RepoEvidence] = Field(default_factory=list)
    is_mock: bool = False

    @property
    def substantive_count(self) -> int:
        return len(self.activity) + len(self.repos)


class FailureKind(str, Enum):
    INVALID_SUBJECT = "invalid_subject"
    NOT_FOUND = "not_found"
    UPSTREAM_BLOCKED = "upstream_blocked"
    NO_ACTIVITY = "no_activity"
    UPSTREAM_ERROR = "upstream_error"


class CollectionFailure(CardModel):
    kind: FailureKind
    message: str


class CollectionResult(CardModel):
    """Typed outcome of a collector run: a bundle or a failure, never both."""

    success: bool
    bundle: EvidenceBundle | None = None
    failure: CollectionFailure | None = None

    @classmethod
    def ok(cls, bundle: EvidenceBundle) -> CollectionResult:
        return cls(success=True, bundle=bundle)

    @classmethod
    def fail(cls, kind: FailureKind, message: str) -> CollectionResult:
        return cls(success=False, failure=CollectionFailure(kind=kind, message=message))


# ---------------------------------------------------------------------------
# Scout / deep evidence
# ---------------------------------------------------------------------------


class ScoutSelection(CardModel):
    """Repository and file paths picked by the scout pass.

    The empty selection is a valid terminal state meaning "skip deep evidence".
    """

    selected_repo: str = ""
    file_paths: list[str] = Field(default_factory=list)

    @field_validator("selected_repo")
    @classmethod
    def _strip_repo(cls, value: str) -> str:
        return value.strip()

    @field_validator("file_paths")
    @classmethod
    def _clean_paths(cls, value: list[str]) -> list[str]:
        return [p.strip().lstrip("/") for p in value if p and p.strip()]

    @property
    def is_empty(self) -> bool:
        return not self.selected_repo or not self.file_paths


class FileEvidence(CardModel):
    path: str
    content: str


class DeepEvidence(CardModel):
    repo: str = ""
    files: list[FileEvidence] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n\n".join(f"--- FILE: {f.path} ---\n{f.content}" for f in self.files)


# ---------------------------------------------------------------------------
# Rate gate
# ---------------------------------------------------------------------------


class RateDecision(CardModel):
    """Admission decision for one pipeline run. ``reset`` is epoch milliseconds."""

    success: bool
    limit: int
    remaining: int
    reset: int
    error: str | None = None

    def metadata(self) -> dict[str, int]:
        return {"limit": self.limit, "remaining": self.remaining, "reset": self.reset}
