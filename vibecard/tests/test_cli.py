"""Tests for the CLI entry point."""

from __future__ import annotations

import json

from click.testing import CliRunner

from vibecard.cli import main


def test_card_mock_vibe() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["card", "demo", "--mock", "--variant", "vibe"])
    assert result.exit_code == 0
    assert "Demo Developer (@demo)" in result.output
    assert "The Caffeinated Shipper" in result.output


def test_card_mock_holo_json() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["card", "demo", "--mock", "--variant", "holo", "--json"])
    assert result.exit_code == 0
    assert '"archetype": "The Craftsman"' in result.output
    assert '"selectedRepo": "awesome-project"' in result.output


def test_card_writing_invalid_url() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["card", "not-a-profile", "--variant", "writing"])
    assert result.exit_code == 1
    assert "LinkedIn profile URL" in result.output


def test_unknown_provider() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["card", "demo", "--mock", "--provider", "nope"])
    assert result.exit_code == 1
    assert "Unknown provider" in result.output


def test_unknown_variant_rejected() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["card", "demo", "--variant", "tiktok"])
    assert result.exit_code != 0


def test_json_output_is_a_card() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["card", "demo", "--mock", "--json"])
    start = result.output.index("{")
    card, _ = json.JSONDecoder().raw_decode(result.output[start:])
    assert card["profile"]["stats"]["followers"] == 1337
