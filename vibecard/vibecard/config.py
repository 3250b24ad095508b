"""Configuration management for vibecard."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from llmkit import LLMConfig


@dataclass(frozen=True)
class Config:
    """Runtime configuration, populated from environment variables."""

    llm: LLMConfig = field(default_factory=LLMConfig)
    variant: str = "vibe"
    github_api_base: str = "https://api.github.com"
    github_token: str | None = None
    github_user_agent: str = "GitHubVibeCheck"
    http_timeout: float = 10.0
    max_concurrency: int = 4
    max_posts: int = 5
    app_url: str = "http://localhost:3000"
    rate_limit_storage_uri: str | None = None
    rate_limit: str = "3/day"
    rate_limit_prefix: str = "vibecard:ratelimit"

    @classmethod
    def from_env(cls) -> Config:
        return cls(
            llm=LLMConfig.from_env(),
            variant=os.getenv("VIBECARD_VARIANT", cls.variant),
            github_api_base=os.getenv("GITHUB_API_BASE", cls.github_api_base),
            github_token=os.getenv("GITHUB_TOKEN") or None,
            http_timeout=float(os.getenv("VIBECARD_HTTP_TIMEOUT", str(cls.http_timeout))),
            max_concurrency=int(os.getenv("VIBECARD_MAX_CONCURRENCY", str(cls.max_concurrency))),
            app_url=os.getenv("APP_URL", cls.app_url),
            rate_limit_storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI") or None,
            rate_limit=os.getenv("RATE_LIMIT", cls.rate_limit),
        )
