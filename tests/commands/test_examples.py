"""Tests for the --examples flag on CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from commctl.cli import cli

EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["artist", "--examples"], ["commctl artist create", "commctl artist list"]),
    (["artist", "create", "--examples"], ["--price 250 --revisions 2"]),
    (["artist", "list", "--examples"], ["commctl -q artist list"]),
    (["artist", "show", "--examples"], ["commctl artist show"]),
    (["customer", "--examples"], ["commctl customer create"]),
    (["customer", "create", "--examples"], ["Tomas Reyes"]),
    (["commission", "--examples"], ["commctl commission request", "--status pending"]),
    (["commission", "request", "--examples"], ["--customer"]),
    (["commission", "list", "--examples"], ["--status artwork_submitted"]),
    (["commission", "accept", "--examples"], ["commctl commission accept"]),
    (["commission", "reject", "--examples"], ["commctl commission reject"]),
    (["commission", "submit", "--examples"], ["https://example.com/art/v2.png"]),
    (["commission", "revise", "--examples"], ["commctl commission revise"]),
    (["commission", "approve", "--examples"], ["commctl commission approve"]),
    (["commission", "cancel", "--examples"], ["commctl commission cancel"]),
    (["check", "--examples"], ["commctl check --rollback", "--errors-only"]),
    (["init", "--examples"], ["--currency USD"]),
    (["upgrade", "--examples"], ["commctl upgrade --check"]),
]


@pytest.mark.parametrize(
    ("args", "keywords"),
    EXAMPLES_COMMANDS,
    ids=[" ".join(a[:-1]) for a, _ in EXAMPLES_COMMANDS],
)
def test_examples_flag(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Examples for '" in result.stdout
    for keyword in keywords:
        assert keyword in result.stdout


def test_examples_listed_in_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["commission", "accept", "--help"])
    assert "--examples" in result.stdout


def test_examples_skip_market(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    cli_runner.invoke(cli, ["check", "--examples"])
    assert not (tmp_path / ".commctl").exists()
