"""CLI entry point for vibecard."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from dataclasses import replace

import click

from vibecard.config import Config
from vibecard.models import CollectionFailure
from vibecard.variants import VARIANTS


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _apply_llm_overrides(
    config: Config,
    provider: str | None,
    model: str | None,
    api_key: str | None,
) -> Config:
    from llmkit import get_provider, list_providers

    overrides: dict[str, object] = {}
    if provider:
        pinfo = get_provider(provider)
        if not pinfo:
            click.echo(f"Unknown provider: {provider}", err=True)
            click.echo(f"Available: {', '.join(list_providers())}", err=True)
            sys.exit(1)
        overrides["provider"] = pinfo.name
        overrides["api_base"] = pinfo.api_base
        if not model:
            overrides["model"] = pinfo.default_model
        if not api_key:
            overrides["api_key"] = os.getenv(pinfo.env_key)
    if model:
        overrides["model"] = model
    if api_key:
        overrides["api_key"] = api_key
    if overrides:
        config = replace(config, llm=replace(config.llm, **overrides))
    return config


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """vibecard: turn a public profile into a shareable identity card."""
    _configure_logging(verbose)


@main.command()
@click.argument("subject")
@click.option("--variant", type=click.Choice(sorted(VARIANTS)), default=None, help="Product variant")
@click.option("--mock", is_flag=True, help="Use the offline demo bundle and canned model answers")
@click.option("--provider", default=None, help="LLM provider (openai/anthropic/google/deepseek/openrouter)")
@click.option("--model", "-m", default=None, help="LLM model (e.g. openai/gpt-4o-mini)")
@click.option("--api-key", default=None, help="LLM API key")
@click.option("--json", "as_json", is_flag=True, help="Print the raw card JSON")
def card(
    subject: str,
    variant: str | None,
    mock: bool,
    provider: str | None,
    model: str | None,
    api_key: str | None,
    as_json: bool,
) -> None:
    """Build one identity card for SUBJECT (GitHub username or LinkedIn URL)."""
    from vibecard.pipeline import Pipeline
    from vibecard.ratelimit import DisabledRateGate

    config = _apply_llm_overrides(Config.from_env(), provider, model, api_key)
    pipeline = Pipeline.from_config(config, variant=variant, rate_gate=DisabledRateGate())

    outcome = asyncio.run(pipeline.run(subject, use_mock=mock))
    if isinstance(outcome, CollectionFailure):
        click.echo(f"✗ {outcome.message}", err=True)
        sys.exit(1)

    payload = outcome.to_payload()
    if as_json:
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    analysis = payload["analysis"]
    profile = payload["profile"]
    click.echo(f"{profile['name'] or profile['username']} (@{profile['username']})")
    click.echo(f"  Archetype: {analysis['archetype']}")
    if analysis.get("personality"):
        click.echo(f"  {analysis['personality']}")
    if analysis.get("roast"):
        click.echo(f"  Roast: {analysis['roast']}")
    for tip in analysis.get("advice", []):
        click.echo(f"  - {tip}")


@main.command()
@click.option("--variant", type=click.Choice(sorted(VARIANTS)), default=None, help="Product variant")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
def serve(variant: str | None, host: str, port: int) -> None:
    """Serve POST /api/generate for one variant."""
    import uvicorn

    from vibecard.pipeline import Pipeline
    from vibecard.server import create_app

    config = Config.from_env()
    if not config.llm.api_key:
        logging.getLogger(__name__).error(
            "No LLM API key configured; generation requests will fail until one is set."
        )
    pipeline = Pipeline.from_config(config, variant=variant)
    click.echo(f"vibecard [{pipeline.variant.title}] listening on http://{host}:{port}")
    uvicorn.run(create_app(lambda: pipeline), host=host, port=port)


if __name__ == "__main__":
    main()
