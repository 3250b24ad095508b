"""HTTP utilities shared by the collectors and the deep fetcher."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/125.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "en-US,en;q=0.9",
}

GITHUB_JSON = "application/vnd.github.v3+json"
GITHUB_RAW = "application/vnd.github.v3.raw"


def github_headers(token: str | None, user_agent: str) -> dict[str, str]:
    headers: dict[str, str] = {"Accept": GITHUB_JSON, "User-Agent": user_agent}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


@asynccontextmanager
async def open_client(
    client: httpx.AsyncClient | None = None,
    *,
    timeout: float = 10.0,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield *client* if given, otherwise a short-lived client closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
        yield owned


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
) -> Any:
    resp = await client.get(url, headers=headers, params=params)
    resp.raise_for_status()
    return resp.json()


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
) -> str:
    resp = await client.get(url, headers=headers, params=params)
    resp.raise_for_status()
    return resp.text


def status_of(exc: BaseException) -> int | None:
    """HTTP status carried by *exc*, if it is a status error."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None
