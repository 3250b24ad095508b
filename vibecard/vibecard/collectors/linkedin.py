"""LinkedIn public profile collector (best effort, no login)."""

from __future__ import annotations

import json
import logging
import re
from typing import Any
from urllib.parse import urlparse

import httpx
import trafilatura

from vibecard.collectors.base import BaseCollector
from vibecard.collectors.mock import mock_linkedin_bundle
from vibecard.models import (
    POST_CHAR_CAP,
    POST_MIN_CHARS,
    ActivityRecord,
    CollectionResult,
    EvidenceBundle,
    FailureKind,
    ProfileStats,
    ProfileSummary,
)
from vibecard.utils.http import BROWSER_HEADERS, open_client, status_of
from vibecard.utils.text import clip, first_line, normalize, redact

logger = logging.getLogger(__name__)

_LD_JSON_RE = re.compile(
    r'<script[^>]+type="application/ld\+json"[^>]*>(.*?)</script>',
    re.IGNORECASE | re.DOTALL,
)
_POST_TYPES = {"Article", "BlogPosting", "DiscussionForumPosting", "SocialMediaPosting"}

INVALID_URL_MESSAGE = "Please provide a LinkedIn profile URL like https://www.linkedin.com/in/username"
NOT_FOUND_MESSAGE = "LinkedIn profile not found. Check the URL and try again."
BLOCKED_MESSAGE = (
    "LinkedIn blocked the request (rate limit or login wall). Try again later or use demo mode."
)
NO_POSTS_MESSAGE = "No public posts found on this profile. The profile may be private or inactive."
UPSTREAM_MESSAGE = "Failed to fetch the LinkedIn profile. Please try again later."


class LinkedInCollector(BaseCollector):
    """Read posts from the public (logged-out) view of a LinkedIn profile."""

    platform = "LinkedIn"

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        max_posts: int = 5,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self.max_posts = max_posts
        self._client = client

    async def collect(self, subject: str) -> CollectionResult:
        if self.is_demo(subject):
            return self.mock()
        slug = self.extract_slug(subject)
        if not slug:
            return CollectionResult.fail(FailureKind.INVALID_SUBJECT, INVALID_URL_MESSAGE)
        if self.is_demo(slug):
            return self.mock()

        url = f"https://www.linkedin.com/in/{slug}/"
        async with open_client(self._client, timeout=self.timeout) as client:
            try:
                resp = await client.get(url, headers=BROWSER_HEADERS)
                if "authwall" in resp.url.path:
                    logger.warning("LinkedIn served the login wall for %s", slug)
                    return CollectionResult.fail(FailureKind.UPSTREAM_BLOCKED, BLOCKED_MESSAGE)
                resp.raise_for_status()
                html = resp.text
            except httpx.HTTPError as exc:
                return self._fetch_failure(slug, exc)

        profile, posts = self.parse_profile(html, slug, url)
        posts = [p for p in posts if len(p) >= POST_MIN_CHARS][: self.max_posts]
        if not posts:
            return CollectionResult.fail(FailureKind.NO_ACTIVITY, NO_POSTS_MESSAGE)

        return CollectionResult.ok(
            EvidenceBundle(
                platform=self.platform,
                profile=profile,
                activity=[ActivityRecord(message=first_line(p), origin=url) for p in posts],
                samples=posts,
            )
        )

    def mock(self) -> CollectionResult:
        return CollectionResult.ok(mock_linkedin_bundle())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def extract_slug(subject: str) -> str:
        text = subject.strip()
        parsed = urlparse(text if "://" in text else f"https://{text}")
        if not parsed.netloc.lower().endswith("linkedin.com"):
            return ""
        parts = [p for p in parsed.path.split("/") if p]
        if len(parts) < 2 or parts[0] != "in":
            return ""
        return parts[1]

    @staticmethod
    def _fetch_failure(slug: str, exc: httpx.HTTPError) -> CollectionResult:
        status = status_of(exc)
        if status == 404:
            return CollectionResult.fail(FailureKind.NOT_FOUND, NOT_FOUND_MESSAGE)
        # 999 is LinkedIn's bot-detection status.
        if status in (401, 403, 429, 999):
            logger.warning("LinkedIn refused profile %s (HTTP %s)", slug, status)
            return CollectionResult.fail(FailureKind.UPSTREAM_BLOCKED, BLOCKED_MESSAGE)
        logger.warning("Failed to fetch LinkedIn profile %s", slug, exc_info=exc)
        return CollectionResult.fail(FailureKind.UPSTREAM_ERROR, UPSTREAM_MESSAGE)

    @classmethod
    def parse_profile(cls, html: str, slug: str, url: str) -> tuple[ProfileSummary, list[str]]:
        """Pull the person and their posts out of the page's JSON-LD graph.

        Falls back to trafilatura's main-text extraction when the page carries
        no post nodes.
        """
        person: dict[str, Any] = {}
        posts: list[str] = []
        for node in _ld_nodes(html):
            types = node.get("@type")
            types = set(types) if isinstance(types, list) else {types}
            if "Person" in types and not person:
                person = node
            elif types & _POST_TYPES:
                text = node.get("articleBody") or node.get("text") or node.get("headline") or ""
                if isinstance(text, str) and text.strip():
                    posts.append(clip(redact(normalize(text)), POST_CHAR_CAP))

        if not posts:
            posts = _fallback_paragraphs(html, url)

        profile = ProfileSummary(
            username=slug,
            name=_as_text(person.get("name")) or slug,
            bio=_as_text(person.get("description") or person.get("jobTitle")),
            avatar_url=_image_url(person.get("image")),
            stats=ProfileStats(followers=_follower_count(person)),
        )
        return profile, posts


def _ld_nodes(html: str) -> list[dict[str, Any]]:
    nodes: list[dict[str, Any]] = []
    for match in _LD_JSON_RE.finditer(html):
        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError:
            continue
        items = data if isinstance(data, list) else [data]
        for item in items:
            if not isinstance(item, dict):
                continue
            graph = item.get("@graph")
            if isinstance(graph, list):
                nodes.extend(n for n in graph if isinstance(n, dict))
            else:
                nodes.append(item)
    return nodes


def _fallback_paragraphs(html: str, url: str) -> list[str]:
    try:
        text = trafilatura.extract(html, url=url)
    except Exception:
        logger.warning("trafilatura extraction failed for %s", url, exc_info=True)
        return []
    if not text:
        return []
    return [redact(normalize(p)) for p in text.splitlines() if p.strip()]


def _as_text(value: Any) -> str:
    if isinstance(value, list):
        value = value[0] if value else ""
    return value.strip() if isinstance(value, str) else ""


def _image_url(value: Any) -> str:
    if isinstance(value, dict):
        return _as_text(value.get("contentUrl") or value.get("url"))
    return _as_text(value)


def _follower_count(person: dict[str, Any]) -> int:
    stats = person.get("interactionStatistic")
    for stat in stats if isinstance(stats, list) else [stats]:
        if not isinstance(stat, dict):
            continue
        if "Follow" in str(stat.get("interactionType", "")):
            try:
                return max(0, int(stat.get("userInteractionCount") or 0))
            except (TypeError, ValueError):
                return 0
    return 0
