"""Tests for the pipeline orchestrator."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from llmkit import LLMClient, LLMConfig, ReplayClient
from vibecard.chains.analysis import VIBE_FALLBACK
from vibecard.chains.generation import CODE_FALLBACK
from vibecard.chains.scout import SCOUT_SPEC
from vibecard.collectors import BaseCollector, GitHubCollector, LinkedInCollector
from vibecard.collectors.github import BLOCKED_MESSAGE, NOT_FOUND_MESSAGE
from vibecard.collectors.mock import mock_github_bundle
from vibecard.config import Config
from vibecard.models import CollectionResult, DeepEvidence, FailureKind, FileEvidence, RateDecision
from vibecard.pipeline import UNEXPECTED_MESSAGE, Pipeline
from vibecard.ratelimit import DisabledRateGate
from vibecard.variants import HOLO, VIBE, WRITING, get_variant


class _FakeCollector(BaseCollector):
    platform = "GitHub"

    def __init__(self, result: CollectionResult | Exception) -> None:
        self.result = result

    async def collect(self, subject: str) -> CollectionResult:
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    def mock(self) -> CollectionResult:
        return CollectionResult.ok(mock_github_bundle())


class _NoModel:
    async def complete(self, system: str, user: str) -> str:
        raise AssertionError("the real model must not be called")


class _StaticModel:
    def __init__(self, content: str) -> None:
        self.content = content

    async def complete(self, system: str, user: str) -> str:
        return self.content


class _DenyGate:
    async def check(self, identifier: str) -> RateDecision:
        return RateDecision(
            success=False, limit=3, remaining=0, reset=1_700_000_000_000, error="Rate limit exceeded."
        )


class _FakeFetcher:
    def __init__(self, evidence: DeepEvidence | Exception) -> None:
        self.evidence = evidence
        self.calls: list[tuple[Any, str]] = []

    async def fetch(self, selection, owner: str) -> DeepEvidence:
        self.calls.append((selection, owner))
        if isinstance(self.evidence, Exception):
            raise self.evidence
        return self.evidence


def _never():
    raise AssertionError("factory must not be called")


def _live_bundle() -> CollectionResult:
    return CollectionResult.ok(mock_github_bundle().model_copy(update={"is_mock": False}))


def _pipeline(variant=VIBE, *, model=None, rate_gate=None, collector=None, fetcher=None) -> Pipeline:
    return Pipeline(
        variant,
        model=model or _NoModel(),
        rate_gate=rate_gate or DisabledRateGate(),
        collector_factory=collector or GitHubCollector,
        fetcher_factory=fetcher,
    )


class TestMockFlow:
    @pytest.mark.asyncio
    async def test_vibe_demo(self) -> None:
        response = await _pipeline().handle({"subjectIdentifier": "demo", "useMockData": True}, "1.1.1.1")
        assert response.status_code == 200
        body = response.body
        assert body["success"] is True
        data = body["data"]
        assert data["profile"]["username"] == "demo"
        assert data["profile"]["stats"]["repos"] == 42
        assert data["isMock"] is True
        assert data["analysis"]["archetype"] == "The Caffeinated Shipper"
        assert data["artifact"]["commitMessage"].startswith("feat:")
        assert data["evidence"] is None
        assert set(body["rateLimit"]) == {"limit", "remaining", "reset"}

    @pytest.mark.asyncio
    async def test_mock_flag_ignores_subject(self) -> None:
        response = await _pipeline().handle({"subjectIdentifier": "torvalds", "useMockData": True}, "ip")
        assert response.body["data"]["profile"]["username"] == "demo"

    @pytest.mark.asyncio
    async def test_holo_demo_includes_evidence(self) -> None:
        pipeline = _pipeline(HOLO, fetcher=_never)
        response = await pipeline.handle({"username": "demo", "useMockData": True}, "ip")
        assert response.status_code == 200
        data = response.body["data"]
        assert data["analysis"]["archetype"] == "The Craftsman"
        assert data["evidence"]["selection"]["selectedRepo"] == "awesome-project"
        assert data["evidence"]["files"][0]["path"] == "lib/engine.ts"
        assert "runEngine" in data["evidence"]["files"][0]["content"]

    @pytest.mark.asyncio
    async def test_writing_demo(self) -> None:
        pipeline = _pipeline(WRITING, collector=LinkedInCollector)
        response = await pipeline.handle(
            {"profileUrl": "https://www.linkedin.com/in/someone", "useMockData": True}, "ip"
        )
        assert response.status_code == 200
        data = response.body["data"]
        assert data["platform"] == "LinkedIn"
        assert data["analysis"]["tone"] == "Inspirational"
        assert len(data["artifact"]["posts"]) == 3


class TestRequestValidation:
    @pytest.mark.parametrize(
        "payload",
        [
            [],
            "demo",
            None,
            {},
            {"subjectIdentifier": ""},
            {"subjectIdentifier": "   "},
            {"subjectIdentifier": 5},
            {"subjectIdentifier": "demo", "useMockData": "yes"},
        ],
    )
    @pytest.mark.asyncio
    async def test_malformed(self, payload: Any) -> None:
        response = await _pipeline(collector=_never).handle(payload, "ip")
        assert response.status_code == 400
        assert response.body["success"] is False
        assert response.body["error"].startswith("Invalid request")

    @pytest.mark.asyncio
    async def test_writing_requires_url(self) -> None:
        pipeline = _pipeline(WRITING, collector=_never)
        response = await pipeline.handle({"subjectIdentifier": "jane"}, "ip")
        assert response.status_code == 400
        assert "Invalid URL format" in response.body["error"]


class TestFailures:
    @pytest.mark.asyncio
    async def test_rate_limited_before_collection(self) -> None:
        pipeline = _pipeline(rate_gate=_DenyGate(), collector=_never)
        response = await pipeline.handle({"subjectIdentifier": "octo"}, "ip")
        assert response.status_code == 429
        assert response.body["error"] == "Rate limit exceeded."
        assert response.body["rateLimit"] == {"limit": 3, "remaining": 0, "reset": 1_700_000_000_000}

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        failure = CollectionResult.fail(FailureKind.NOT_FOUND, NOT_FOUND_MESSAGE)
        pipeline = _pipeline(collector=lambda: _FakeCollector(failure))
        response = await pipeline.handle({"subjectIdentifier": "ghost"}, "ip")
        assert response.status_code == 400
        assert "not found" in response.body["error"].lower()

    @pytest.mark.asyncio
    async def test_upstream_blocked(self) -> None:
        failure = CollectionResult.fail(FailureKind.UPSTREAM_BLOCKED, BLOCKED_MESSAGE)
        pipeline = _pipeline(collector=lambda: _FakeCollector(failure))
        response = await pipeline.handle({"subjectIdentifier": "octo"}, "ip")
        assert response.status_code == 400
        assert "rate limit" in response.body["error"].lower()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(self) -> None:
        pipeline = _pipeline(collector=lambda: _FakeCollector(RuntimeError("secret internals")))
        response = await pipeline.handle({"subjectIdentifier": "octo"}, "ip")
        assert response.status_code == 500
        assert response.body == {"success": False, "error": UNEXPECTED_MESSAGE}

    @pytest.mark.asyncio
    async def test_missing_api_key_is_500(self) -> None:
        pipeline = _pipeline(model=LLMClient(LLMConfig(api_key=None)))
        response = await pipeline.handle({"subjectIdentifier": "demo"}, "ip")
        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_unusable_model_output_uses_fallbacks(self) -> None:
        pipeline = _pipeline(model=_StaticModel("not json at all"), collector=lambda: _FakeCollector(_live_bundle()))
        response = await pipeline.handle({"subjectIdentifier": "octo"}, "ip")
        assert response.status_code == 200
        data = response.body["data"]
        assert data["analysis"]["archetype"] == VIBE_FALLBACK.archetype
        assert data["artifact"]["code"] == CODE_FALLBACK.code


class TestDeepEvidence:
    def _model(self, scout: dict[str, Any]) -> ReplayClient:
        return ReplayClient({**HOLO.demo_responses, SCOUT_SPEC.system_prompt: json.dumps(scout)})

    @pytest.mark.asyncio
    async def test_empty_scout_skips_fetch(self) -> None:
        fetcher = _FakeFetcher(DeepEvidence())
        pipeline = _pipeline(
            HOLO,
            model=self._model({"selectedRepo": "", "filePaths": []}),
            collector=lambda: _FakeCollector(_live_bundle()),
            fetcher=lambda: fetcher,
        )
        response = await pipeline.handle({"subjectIdentifier": "octo"}, "ip")
        assert response.status_code == 200
        assert fetcher.calls == []
        assert response.body["data"]["evidence"]["files"] == []

    @pytest.mark.asyncio
    async def test_fetched_files_reach_the_audit_prompt(self) -> None:
        model = self._model({"selectedRepo": "awesome-project", "filePaths": ["src/main.rs"]})
        fetcher = _FakeFetcher(
            DeepEvidence(repo="demo/awesome-project", files=[FileEvidence(path="src/main.rs", content="fn main() {}")])
        )
        pipeline = _pipeline(
            HOLO, model=model, collector=lambda: _FakeCollector(_live_bundle()), fetcher=lambda: fetcher
        )
        response = await pipeline.handle({"subjectIdentifier": "octo"}, "ip")
        assert response.status_code == 200
        assert fetcher.calls[0][1] == "demo"
        audit_prompt = next(user for system, user in model.calls if system == HOLO.analysis.system_prompt)
        assert "--- FILE: src/main.rs ---\nfn main() {}" in audit_prompt

    @pytest.mark.asyncio
    async def test_fetch_failure_degrades(self) -> None:
        model = self._model({"selectedRepo": "awesome-project", "filePaths": ["src/main.rs"]})
        pipeline = _pipeline(
            HOLO,
            model=model,
            collector=lambda: _FakeCollector(_live_bundle()),
            fetcher=lambda: _FakeFetcher(RuntimeError("tree exploded")),
        )
        response = await pipeline.handle({"subjectIdentifier": "octo"}, "ip")
        assert response.status_code == 200
        assert response.body["data"]["evidence"]["files"] == []
        assert response.body["data"]["analysis"]["archetype"] == "The Craftsman"


def test_get_variant() -> None:
    assert get_variant("HOLO") is HOLO
    with pytest.raises(ValueError):
        get_variant("tiktok")


class TestAgainstStubbedGitHub:
    @pytest.mark.parametrize("status, needle", [(404, "not found"), (403, "rate limit")])
    @pytest.mark.asyncio
    async def test_profile_status_mapping(self, status: int, needle: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, json={"message": "nope"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            pipeline = Pipeline.from_config(
                Config(), variant="vibe", model=_NoModel(), rate_gate=DisabledRateGate(), http_client=client
            )
            response = await pipeline.handle({"subjectIdentifier": "___nonexistent-user___"}, "ip")
        assert response.status_code == 400
        assert needle in response.body["error"].lower()

    def test_from_config_wires_variant(self) -> None:
        pipeline = Pipeline.from_config(Config(variant="writing"), rate_gate=DisabledRateGate())
        assert pipeline.variant is WRITING
        assert pipeline.fetcher_factory is None
        assert pipeline.model.config.extra_headers["X-Title"] == "EchoWrite"
        assert isinstance(pipeline.collector_factory(), LinkedInCollector)
