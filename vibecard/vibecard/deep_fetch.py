"""Fetch the raw source files the scout pass selected."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from vibecard.collectors.github import DEFAULT_API_BASE, DEFAULT_USER_AGENT
from vibecard.models import MAX_SCOUT_PATHS, DeepEvidence, FileEvidence, ScoutSelection
from vibecard.utils.http import GITHUB_RAW, fetch_json, fetch_text, github_headers, open_client

logger = logging.getLogger(__name__)


class DeepContentFetcher:
    """List a repository tree once and read up to two selected files concurrently."""

    def __init__(
        self,
        *,
        api_base: str = DEFAULT_API_BASE,
        token: str | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.headers = github_headers(token, user_agent)
        self.timeout = timeout
        self._client = client

    @staticmethod
    def qualify(repo: str, owner: str) -> str:
        """``name`` → ``owner/name``; ``owner/name`` is kept as-is."""
        repo = repo.strip().strip("/")
        if "github.com/" in repo:
            repo = repo.split("github.com/", 1)[1]
        return repo if "/" in repo else f"{owner}/{repo}"

    async def fetch(self, selection: ScoutSelection, owner: str) -> DeepEvidence:
        if selection.is_empty:
            return DeepEvidence()
        full_name = self.qualify(selection.selected_repo, owner)

        async with open_client(self._client, timeout=self.timeout) as client:
            try:
                tree = await fetch_json(
                    client,
                    f"{self.api_base}/repos/{full_name}/git/trees/HEAD",
                    headers=self.headers,
                    params={"recursive": "1"},
                )
            except (httpx.HTTPError, ValueError):
                logger.warning("Could not list tree for %s", full_name, exc_info=True)
                return DeepEvidence(repo=full_name)

            present = _blob_paths(tree)
            wanted = [p for p in selection.file_paths if p in present][:MAX_SCOUT_PATHS]
            if not wanted:
                logger.info("None of %s exist in %s", selection.file_paths, full_name)
                return DeepEvidence(repo=full_name)

            contents = await asyncio.gather(
                *(self._fetch_file(client, full_name, path) for path in wanted)
            )

        files = [FileEvidence(path=p, content=c) for p, c in zip(wanted, contents) if c]
        return DeepEvidence(repo=full_name, files=files)

    async def _fetch_file(self, client: httpx.AsyncClient, full_name: str, path: str) -> str:
        try:
            return await fetch_text(
                client,
                f"{self.api_base}/repos/{full_name}/contents/{path}",
                headers={**self.headers, "Accept": GITHUB_RAW},
            )
        except httpx.HTTPError:
            logger.warning("Could not read %s from %s", path, full_name, exc_info=True)
            return ""


def _blob_paths(tree: Any) -> set[str]:
    entries = tree.get("tree") if isinstance(tree, dict) else None
    if not isinstance(entries, list):
        return set()
    return {e["path"] for e in entries if isinstance(e, dict) and e.get("type") == "blob" and e.get("path")}
