"""Tests for the GitHub collector (mocked transport)."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import httpx
import pytest

from vibecard.collectors.github import (
    BLOCKED_MESSAGE,
    NOT_FOUND_MESSAGE,
    GitHubCollector,
)
from vibecard.models import FailureKind

_PROFILE = {
    "login": "octo",
    "name": "Octo Cat",
    "bio": "eight arms, one keyboard",
    "avatar_url": "https://avatars.example/octo.png",
    "public_repos": 5,
    "followers": 10,
    "following": 2,
}

_REPOS = [
    {
        "name": "alpha",
        "full_name": "octo/alpha",
        "description": "Parser toolkit",
        "stargazers_count": 5,
        "topics": ["cli", "parsing"],
        "fork": False,
    },
    {"name": "forked", "full_name": "octo/forked", "fork": True, "stargazers_count": 900},
    {"name": "beta", "full_name": "octo/beta", "stargazers_count": 50, "fork": False},
]


def _routes() -> dict[str, Any]:
    return {
        "/users/octo": _PROFILE,
        "/users/octo/repos": _REPOS,
        "/repos/octo/alpha/commits": [
            {"commit": {"message": "feat: add parser\n\nlong body", "author": {"date": "2026-01-01T00:00:00Z"}}},
            {"commit": {"message": "Merge pull request #1 from octo/dev"}},
        ],
        "/repos/octo/beta/commits": [{"commit": {"message": "fix: typo"}}],
        "/repos/octo/alpha/readme": "A" * 600,
        "/repos/octo/beta/readme": "tiny",
        "/repos/octo/alpha/languages": {"Python": 900, "Shell": 50, "Makefile": 10, "Dockerfile": 5},
        "/repos/octo/alpha/contents": [
            {"name": "src", "type": "dir"},
            {"name": "package.json", "type": "file"},
        ],
        "/repos/octo/alpha/contents/package.json": '{\n  "dependencies": {\n    "left-pad": "1.0.0"\n  }\n}',
        "/repos/octo/beta/languages": {},
        "/repos/octo/beta/contents": [],
    }


class _Recorder:
    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        value = self.routes.get(request.url.path)
        if value is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(value, int):
            return httpx.Response(value, json={"message": "error"})
        if isinstance(value, str):
            return httpx.Response(200, text=value)
        return httpx.Response(200, json=value)

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


async def _collect(routes: dict[str, Any], subject: str = "octo", **kwargs: Any):
    recorder = _Recorder(routes)
    async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as client:
        collector = GitHubCollector(client=client, **kwargs)
        result = await collector.collect(subject)
    return result, recorder


class TestExtractUsername:
    @pytest.mark.parametrize(
        "subject",
        ["octo", "@octo", " octo ", "https://github.com/octo", "github.com/octo/", "https://github.com/octo/alpha"],
    )
    def test_forms(self, subject: str) -> None:
        assert GitHubCollector.extract_username(subject) == "octo"


class TestCollect:
    @pytest.mark.asyncio
    async def test_success_bundle(self) -> None:
        result, _ = await _collect(_routes())
        assert result.success
        bundle = result.bundle
        assert bundle.platform == "GitHub"
        assert bundle.profile.username == "octo"
        assert bundle.profile.stats.followers == 10
        assert [a.message for a in bundle.activity] == ["feat: add parser", "fix: typo"]
        assert bundle.activity[0].origin == "octo/alpha"
        assert bundle.activity[0].timestamp == "2026-01-01T00:00:00Z"

    @pytest.mark.asyncio
    async def test_readmes_capped_and_short_ones_dropped(self) -> None:
        result, _ = await _collect(_routes())
        assert result.bundle.samples == ["A" * 500]

    @pytest.mark.asyncio
    async def test_repo_details(self) -> None:
        result, _ = await _collect(_routes())
        alpha = result.bundle.repos[0]
        assert alpha.full_name == "octo/alpha"
        assert alpha.languages == ["Python", "Shell", "Makefile"]
        assert alpha.structure == ["/src", "package.json"]
        assert alpha.dependencies == '{"dependencies":{"left-pad":"1.0.0"}}'
        assert alpha.topics == ["cli", "parsing"]

    @pytest.mark.asyncio
    async def test_forks_are_never_read(self) -> None:
        _, recorder = await _collect(_routes())
        assert not any(path.startswith("/repos/octo/forked") for path in recorder.paths)

    @pytest.mark.asyncio
    async def test_token_sent_as_bearer(self) -> None:
        _, recorder = await _collect(_routes(), token="ghp_test")
        assert all(r.headers["Authorization"] == "Bearer ghp_test" for r in recorder.requests)
        assert recorder.requests[0].headers["User-Agent"] == "GitHubVibeCheck"

    @pytest.mark.asyncio
    async def test_failed_branch_degrades(self) -> None:
        routes = _routes()
        routes["/repos/octo/alpha/languages"] = 500
        routes["/repos/octo/alpha/readme"] = 500
        result, _ = await _collect(routes)
        assert result.success
        assert [r.name for r in result.bundle.repos] == ["beta"]
        assert result.bundle.samples == []
        assert len(result.bundle.activity) == 2

    @pytest.mark.asyncio
    async def test_empty_repository_commits(self) -> None:
        routes = _routes()
        routes["/repos/octo/beta/commits"] = 409
        result, _ = await _collect(routes)
        assert [a.message for a in result.bundle.activity] == ["feat: add parser"]

    @pytest.mark.asyncio
    async def test_commit_cap(self) -> None:
        routes = _routes()
        routes["/repos/octo/beta/commits"] = [{"commit": {"message": f"chore: {i}"}} for i in range(10)]
        result, _ = await _collect(routes, max_commits=4)
        assert len(result.bundle.activity) == 4


class TestMalformedPayloads:
    @pytest.mark.asyncio
    async def test_non_object_commits_degrade(self) -> None:
        routes = _routes()
        routes["/repos/octo/alpha/commits"] = ["not-an-object"]
        routes["/repos/octo/beta/commits"] = [{"commit": "nope"}, {"commit": {"message": 42, "author": "x"}}]
        result, _ = await _collect(routes)
        assert result.success
        assert result.bundle.activity == []
        assert [r.name for r in result.bundle.repos] == ["alpha", "beta"]

    @pytest.mark.asyncio
    async def test_odd_repo_entries_are_skipped(self) -> None:
        routes = _routes()
        routes["/users/octo/repos"] = ["junk", {"name": "nameless"}, *_REPOS]
        routes["/repos/octo/alpha/contents"] = ["junk", {"name": "src", "type": "dir"}]
        result, _ = await _collect(routes)
        assert result.success
        assert result.bundle.repos[0].structure == ["/src"]

    @pytest.mark.asyncio
    async def test_one_bad_repo_keeps_the_others(self) -> None:
        routes = _routes()
        routes["/users/octo/repos"] = [{**_REPOS[0], "topics": "cli"}, _REPOS[2]]
        result, _ = await _collect(routes)
        assert [r.name for r in result.bundle.repos] == ["beta"]

    @pytest.mark.asyncio
    async def test_unexpected_branch_error_degrades(self) -> None:
        with patch.object(GitHubCollector, "_fetch_readmes", side_effect=AttributeError("boom")):
            result, _ = await _collect(_routes())
        assert result.success
        assert result.bundle.samples == []
        assert len(result.bundle.activity) == 2

    @pytest.mark.asyncio
    async def test_non_object_profile_is_upstream_error(self) -> None:
        result, _ = await _collect({"/users/octo": ["octo"]})
        assert result.failure.kind is FailureKind.UPSTREAM_ERROR


class TestFailures:
    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        result, _ = await _collect({}, subject="ghost")
        assert not result.success
        assert result.failure.kind is FailureKind.NOT_FOUND
        assert result.failure.message == NOT_FOUND_MESSAGE

    @pytest.mark.parametrize("status", [401, 403, 429])
    @pytest.mark.asyncio
    async def test_blocked(self, status: int) -> None:
        result, _ = await _collect({"/users/octo": status})
        assert result.failure.kind is FailureKind.UPSTREAM_BLOCKED
        assert result.failure.message == BLOCKED_MESSAGE

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        result, _ = await _collect({"/users/octo": 502})
        assert result.failure.kind is FailureKind.UPSTREAM_ERROR

    @pytest.mark.asyncio
    async def test_no_activity(self) -> None:
        result, _ = await _collect({"/users/octo": _PROFILE, "/users/octo/repos": []})
        assert result.failure.kind is FailureKind.NO_ACTIVITY

    @pytest.mark.parametrize("subject", ["", "   ", "https://github.com/"])
    @pytest.mark.asyncio
    async def test_invalid_subject(self, subject: str) -> None:
        result, recorder = await _collect(_routes(), subject=subject)
        assert result.failure.kind is FailureKind.INVALID_SUBJECT
        assert recorder.requests == []


@pytest.mark.asyncio
async def test_demo_subject_skips_network() -> None:
    result, recorder = await _collect({}, subject="Demo")
    assert result.success
    assert result.bundle.is_mock
    assert result.bundle.profile.stats.repos == 42
    assert recorder.requests == []
