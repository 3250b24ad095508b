"""Pipeline orchestrator: rate check → collect → scout → deep fetch → analyze → generate.

``Pipeline.handle`` is the outermost boundary. It is the only place that maps
failures to HTTP status codes; every inner component returns typed values.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Annotated, Any
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel, Field, SerializeAsAny, StrictBool, StringConstraints, ValidationError

from llmkit import ChatModel, LLMClient, ReplayClient
from vibecard.chains.base import Chain
from vibecard.chains.schemas import AnalysisResult
from vibecard.chains.scout import Scout
from vibecard.collectors import BaseCollector, GitHubCollector, LinkedInCollector
from vibecard.collectors.mock import mock_deep_evidence
from vibecard.config import Config
from vibecard.deep_fetch import DeepContentFetcher
from vibecard.models import (
    ActivityRecord,
    CardModel,
    CollectionFailure,
    DeepEvidence,
    EvidenceBundle,
    FileEvidence,
    ProfileSummary,
    ScoutSelection,
)
from vibecard.ratelimit import RateGate, build_rate_gate
from vibecard.variants import Variant, get_variant

logger = logging.getLogger(__name__)

UNEXPECTED_MESSAGE = "An unexpected error occurred. Please try again later."


class RequestError(ValueError):
    """The request body could not be turned into a pipeline run."""


class GenerateRequest(BaseModel):
    subject: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    use_mock_data: StrictBool = False


class EvidenceReport(CardModel):
    selection: ScoutSelection
    repo: str = ""
    files: list[FileEvidence] = Field(default_factory=list)


class IdentityCard(CardModel):
    """The pipeline's output: everything the front end renders."""

    variant: str
    platform: str
    profile: ProfileSummary
    activity: list[ActivityRecord]
    analysis: SerializeAsAny[AnalysisResult]
    artifact: SerializeAsAny[CardModel]
    evidence: EvidenceReport | None = None
    is_mock: bool = False


@dataclass(frozen=True)
class PipelineResponse:
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


class Pipeline:
    """One product variant wired to its collaborators."""

    def __init__(
        self,
        variant: Variant,
        *,
        model: ChatModel,
        rate_gate: RateGate,
        collector_factory: Callable[[], BaseCollector],
        fetcher_factory: Callable[[], DeepContentFetcher] | None = None,
    ) -> None:
        self.variant = variant
        self.model = model
        self.rate_gate = rate_gate
        self.collector_factory = collector_factory
        self.fetcher_factory = fetcher_factory

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        variant: str | None = None,
        model: ChatModel | None = None,
        rate_gate: RateGate | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> Pipeline:
        chosen = get_variant(variant or config.variant)

        def github() -> GitHubCollector:
            return GitHubCollector(
                api_base=config.github_api_base,
                token=config.github_token,
                user_agent=config.github_user_agent,
                timeout=config.http_timeout,
                max_concurrency=config.max_concurrency,
                client=http_client,
            )

        def linkedin() -> LinkedInCollector:
            return LinkedInCollector(
                timeout=config.http_timeout, max_posts=config.max_posts, client=http_client
            )

        def fetcher() -> DeepContentFetcher:
            return DeepContentFetcher(
                api_base=config.github_api_base,
                token=config.github_token,
                user_agent=config.github_user_agent,
                timeout=config.http_timeout,
                client=http_client,
            )

        if model is None:
            model = LLMClient(config.llm.with_routing_headers(config.app_url, chosen.title))
        if rate_gate is None:
            rate_gate = build_rate_gate(
                config.rate_limit_storage_uri, config.rate_limit, config.rate_limit_prefix
            )
        return cls(
            chosen,
            model=model,
            rate_gate=rate_gate,
            collector_factory=linkedin if chosen.platform == "linkedin" else github,
            fetcher_factory=fetcher if chosen.use_scout else None,
        )

    # ------------------------------------------------------------------
    # HTTP-shaped boundary
    # ------------------------------------------------------------------

    async def handle(self, payload: Any, client_id: str) -> PipelineResponse:
        try:
            return await self._handle(payload, client_id)
        except Exception:
            logger.exception("Generation failed for variant %s", self.variant.name)
            return PipelineResponse(500, {"success": False, "error": UNEXPECTED_MESSAGE})

    async def _handle(self, payload: Any, client_id: str) -> PipelineResponse:
        try:
            request = self.parse_request(payload)
        except RequestError as exc:
            return PipelineResponse(400, {"success": False, "error": f"Invalid request: {exc}"})

        decision = await self.rate_gate.check(client_id)
        if not decision.success:
            logger.info("Rate limit denied %s", client_id)
            return PipelineResponse(
                429,
                {"success": False, "error": decision.error, "rateLimit": decision.metadata()},
            )

        outcome = await self.run(request.subject, use_mock=request.use_mock_data)
        if isinstance(outcome, CollectionFailure):
            return PipelineResponse(400, {"success": False, "error": outcome.message})

        return PipelineResponse(
            200,
            {"success": True, "data": outcome.to_payload(), "rateLimit": decision.metadata()},
        )

    def parse_request(self, payload: Any) -> GenerateRequest:
        if not isinstance(payload, dict):
            raise RequestError("request body must be a JSON object")
        subject = payload.get("subjectIdentifier", payload.get(self.variant.subject_field))
        if subject is None:
            raise RequestError(f"subjectIdentifier (or {self.variant.subject_field}) is required")
        try:
            request = GenerateRequest(
                subject=subject, use_mock_data=payload.get("useMockData", False)
            )
        except ValidationError as exc:
            error = exc.errors()[0]
            name = "subjectIdentifier" if error["loc"][0] == "subject" else "useMockData"
            raise RequestError(f"{name}: {error['msg']}") from None
        if self.variant.require_url and not _is_http_url(request.subject):
            raise RequestError("Invalid URL format")
        return request

    # ------------------------------------------------------------------
    # Pipeline proper
    # ------------------------------------------------------------------

    async def run(self, subject: str, *, use_mock: bool = False) -> IdentityCard | CollectionFailure:
        collector = self.collector_factory()
        model: ChatModel = self.model
        if use_mock:
            result = collector.mock()
            model = ReplayClient(self.variant.demo_responses)
        else:
            result = await collector.collect(subject)

        if not result.success:
            logger.info("Collection failed for %r: %s", subject, result.failure.kind.value)
            return result.failure
        bundle = result.bundle

        report: EvidenceReport | None = None
        evidence_text = ""
        if self.variant.use_scout:
            report = await self._gather_deep_evidence(bundle, model)
            evidence_text = DeepEvidence(repo=report.repo, files=report.files).text

        analysis = await Chain(self.variant.analysis, model).invoke(
            self.variant.analysis_variables(bundle, evidence_text)
        )
        artifact = await Chain(self.variant.generation, model).invoke(
            self.variant.generation_variables(analysis)
        )

        return IdentityCard(
            variant=self.variant.name,
            platform=bundle.platform,
            profile=bundle.profile,
            activity=bundle.activity,
            analysis=analysis,
            artifact=artifact,
            evidence=report,
            is_mock=bundle.is_mock,
        )

    async def _gather_deep_evidence(self, bundle: EvidenceBundle, model: ChatModel) -> EvidenceReport:
        """Scout then deep fetch; any failure here degrades to no evidence."""
        selection = ScoutSelection()
        try:
            selection = await Scout(model).select(bundle)
            if selection.is_empty:
                logger.info("Scout selected nothing; skipping deep evidence")
                return EvidenceReport(selection=selection)
            if bundle.is_mock:
                deep = mock_deep_evidence(selection)
            elif self.fetcher_factory is None:
                return EvidenceReport(selection=selection)
            else:
                deep = await self.fetcher_factory().fetch(selection, bundle.profile.username)
        except Exception:
            logger.warning("Deep evidence step failed; continuing without it", exc_info=True)
            return EvidenceReport(selection=selection)
        return EvidenceReport(selection=selection, repo=deep.repo, files=deep.files)
