"""GitHub evidence collector using REST API v3."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar
from urllib.parse import urlparse

import httpx

from vibecard.collectors.base import BaseCollector
from vibecard.collectors.mock import mock_github_bundle
from vibecard.models import (
    README_CHAR_CAP,
    README_MIN_CHARS,
    ActivityRecord,
    CollectionResult,
    EvidenceBundle,
    FailureKind,
    ProfileStats,
    ProfileSummary,
    RepoEvidence,
)
from vibecard.utils.http import GITHUB_RAW, fetch_json, fetch_text, github_headers, open_client, status_of
from vibecard.utils.text import first_line

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_API_BASE = "https://api.github.com"
DEFAULT_USER_AGENT = "GitHubVibeCheck"

DEPENDENCY_FILES = (
    "package.json",
    "go.mod",
    "requirements.txt",
    "pyproject.toml",
    "Gemfile",
    "Cargo.toml",
)

NOT_FOUND_MESSAGE = "GitHub user not found. Check the username and try again."
BLOCKED_MESSAGE = (
    "GitHub API rate limit exceeded. Try again in an hour or add GITHUB_TOKEN to the environment."
)
NO_ACTIVITY_MESSAGE = (
    "No public activity found for this user. The account may be inactive or private."
)
UPSTREAM_MESSAGE = "Failed to fetch GitHub data. Please try again later."


class GitHubCollector(BaseCollector):
    """Collect profile, commits, READMEs and repo structure for a GitHub user."""

    platform = "GitHub"

    def __init__(
        self,
        *,
        api_base: str = DEFAULT_API_BASE,
        token: str | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        max_concurrency: int = 4,
        max_commits: int = 20,
        readme_repos: int = 3,
        detail_repos: int = 3,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.headers = github_headers(token, user_agent)
        self.timeout = timeout
        self.max_commits = max_commits
        self.readme_repos = readme_repos
        self.detail_repos = detail_repos
        self._client = client
        self._slots = asyncio.Semaphore(max(1, max_concurrency))

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def collect(self, subject: str) -> CollectionResult:
        username = self.extract_username(subject)
        if not username:
            return CollectionResult.fail(FailureKind.INVALID_SUBJECT, "A GitHub username is required.")
        if self.is_demo(username):
            return self.mock()

        async with open_client(self._client, timeout=self.timeout) as client:
            logger.info("Fetching GitHub profile: %s", username)
            try:
                profile = await self._fetch_profile(client, username)
            except (httpx.HTTPError, ValueError) as exc:
                return self._profile_failure(username, exc)

            # Secondary signals degrade to empty results individually.
            commits, readmes, details = await asyncio.gather(
                self._isolated("commits", self._fetch_commits(client, username), []),
                self._isolated("readmes", self._fetch_readmes(client, username), []),
                self._isolated("repo details", self._fetch_repo_details(client, username), []),
            )

        bundle = EvidenceBundle(
            platform=self.platform,
            profile=profile,
            activity=commits,
            samples=readmes,
            repos=details,
        )
        if bundle.substantive_count == 0:
            return CollectionResult.fail(FailureKind.NO_ACTIVITY, NO_ACTIVITY_MESSAGE)
        return CollectionResult.ok(bundle)

    def mock(self) -> CollectionResult:
        return CollectionResult.ok(mock_github_bundle())

    # ------------------------------------------------------------------
    # Subject helpers
    # ------------------------------------------------------------------

    @staticmethod
    def extract_username(subject: str) -> str:
        """Accept a bare username, ``@name`` or a github.com profile URL."""
        text = subject.strip().lstrip("@")
        if "github.com" in text:
            parsed = urlparse(text if "://" in text else f"https://{text}")
            parts = [p for p in parsed.path.strip("/").split("/") if p]
            return parts[0] if parts else ""
        return text.strip("/")

    @staticmethod
    def _profile_failure(username: str, exc: BaseException) -> CollectionResult:
        status = status_of(exc)
        if status == 404:
            logger.info("GitHub user %s not found", username)
            return CollectionResult.fail(FailureKind.NOT_FOUND, NOT_FOUND_MESSAGE)
        if status in (401, 403, 429):
            logger.warning("GitHub API refused profile lookup for %s (HTTP %s)", username, status)
            return CollectionResult.fail(FailureKind.UPSTREAM_BLOCKED, BLOCKED_MESSAGE)
        logger.warning("Failed to fetch GitHub profile for %s", username, exc_info=exc)
        return CollectionResult.fail(FailureKind.UPSTREAM_ERROR, UPSTREAM_MESSAGE)

    @staticmethod
    async def _isolated(label: str, coro: Awaitable[T], default: T) -> T:
        try:
            return await coro
        except Exception:
            logger.warning("GitHub %s fetch failed, continuing without it", label, exc_info=True)
            return default

    # ------------------------------------------------------------------
    # API calls
    # ------------------------------------------------------------------

    async def _get_json(self, client: httpx.AsyncClient, path: str, **params: Any) -> Any:
        async with self._slots:
            return await fetch_json(
                client, f"{self.api_base}{path}", headers=self.headers, params=params or None
            )

    async def _get_raw(self, client: httpx.AsyncClient, path: str) -> str:
        async with self._slots:
            return await fetch_text(
                client, f"{self.api_base}{path}", headers={**self.headers, "Accept": GITHUB_RAW}
            )

    async def _list_repos(
        self, client: httpx.AsyncClient, username: str, *, sort: str, per_page: int
    ) -> list[dict[str, Any]]:
        data = await self._get_json(
            client, f"/users/{username}/repos", sort=sort, per_page=per_page, type="owner"
        )
        if not isinstance(data, list):
            return []
        return [
            repo
            for repo in data
            if isinstance(repo, dict) and repo.get("full_name") and not repo.get("fork")
        ]

    async def _fetch_profile(self, client: httpx.AsyncClient, username: str) -> ProfileSummary:
        data = await self._get_json(client, f"/users/{username}")
        if not isinstance(data, dict):
            raise ValueError(f"unexpected profile payload for {username}")
        login = data.get("login") or username
        return ProfileSummary(
            username=login,
            name=data.get("name") or login,
            bio=data.get("bio") or "",
            avatar_url=data.get("avatar_url") or "",
            stats=ProfileStats(
                repos=data.get("public_repos") or 0,
                followers=data.get("followers") or 0,
                following=data.get("following") or 0,
            ),
        )

    async def _fetch_commits(self, client: httpx.AsyncClient, username: str) -> list[ActivityRecord]:
        repos = await self._list_repos(client, username, sort="updated", per_page=10)
        batches = await asyncio.gather(
            *(self._fetch_repo_commits(client, repo["full_name"], username) for repo in repos)
        )
        commits = [record for batch in batches for record in batch]
        return commits[: self.max_commits]

    async def _fetch_repo_commits(
        self, client: httpx.AsyncClient, full_name: str, username: str
    ) -> list[ActivityRecord]:
        try:
            data = await self._get_json(
                client, f"/repos/{full_name}/commits", author=username, per_page=10
            )
        except httpx.HTTPError:
            # Empty repositories answer 409; nothing to learn from them.
            logger.debug("No commits for %s", full_name, exc_info=True)
            return []

        records: list[ActivityRecord] = []
        for item in data if isinstance(data, list) else []:
            commit = item.get("commit") if isinstance(item, dict) else None
            if not isinstance(commit, dict):
                continue
            raw_message = commit.get("message")
            message = first_line(raw_message) if isinstance(raw_message, str) else ""
            if not message or message.startswith("Merge "):
                continue
            records.append(
                ActivityRecord(
                    message=message,
                    origin=full_name,
                    timestamp=_commit_date(commit),
                )
            )
        return records

    async def _fetch_readmes(self, client: httpx.AsyncClient, username: str) -> list[str]:
        # The repos endpoint cannot sort by stars, so rank a wider page locally.
        repos = await self._list_repos(client, username, sort="pushed", per_page=30)
        repos.sort(key=lambda r: r.get("stargazers_count") or 0, reverse=True)
        texts = await asyncio.gather(
            *(self._fetch_readme(client, repo["full_name"]) for repo in repos[: self.readme_repos])
        )
        return [text for text in texts if len(text) > README_MIN_CHARS]

    async def _fetch_readme(self, client: httpx.AsyncClient, full_name: str) -> str:
        try:
            return (await self._get_raw(client, f"/repos/{full_name}/readme"))[:README_CHAR_CAP]
        except httpx.HTTPError:
            logger.debug("No README for %s", full_name)
            return ""

    async def _fetch_repo_details(self, client: httpx.AsyncClient, username: str) -> list[RepoEvidence]:
        repos = await self._list_repos(client, username, sort="updated", per_page=self.detail_repos)
        details = await asyncio.gather(
            *(
                self._isolated(f"details for {repo['full_name']}", self._fetch_repo_detail(client, repo), None)
                for repo in repos[: self.detail_repos]
            )
        )
        return [d for d in details if d is not None]

    async def _fetch_repo_detail(
        self, client: httpx.AsyncClient, repo: dict[str, Any]
    ) -> RepoEvidence | None:
        full_name = repo["full_name"]
        try:
            languages, contents = await asyncio.gather(
                self._get_json(client, f"/repos/{full_name}/languages"),
                self._get_json(client, f"/repos/{full_name}/contents"),
            )
        except httpx.HTTPError:
            logger.warning("Skipping repo details for %s", full_name, exc_info=True)
            return None

        entries = [e for e in contents if isinstance(e, dict)] if isinstance(contents, list) else []
        structure = [
            f"/{entry['name']}" if entry.get("type") == "dir" else entry["name"]
            for entry in entries
            if entry.get("name")
        ]
        manifest = next(
            (e["name"] for e in entries if e.get("type") == "file" and e.get("name") in DEPENDENCY_FILES),
            None,
        )
        dependencies = ""
        if manifest:
            try:
                dependencies = await self._get_raw(client, f"/repos/{full_name}/contents/{manifest}")
            except httpx.HTTPError:
                logger.debug("Could not read %s in %s", manifest, full_name)

        return RepoEvidence(
            name=repo.get("name") or full_name.split("/")[-1],
            full_name=full_name,
            description=repo.get("description") or "",
            languages=list(languages) if isinstance(languages, dict) else [],
            topics=repo.get("topics") or [],
            structure=structure,
            dependencies=_normalise_manifest(dependencies),
            stars=repo.get("stargazers_count") or 0,
        )


def _normalise_manifest(raw: str) -> str:
    """Compact JSON manifests so the character cap keeps more signal."""
    if not raw:
        return ""
    try:
        return json.dumps(json.loads(raw), separators=(",", ":"))
    except ValueError:
        return raw


def _commit_date(commit: dict[str, Any]) -> str | None:
    author = commit.get("author")
    date = author.get("date") if isinstance(author, dict) else None
    return date if isinstance(date, str) else None
