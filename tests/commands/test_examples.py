"""Tests for --examples flag on CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from ctxchain.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["inspect", "--examples"], ["ctxchain inspect describe", "ctxchain inspect check"]),
    (["inspect", "describe", "--examples"], ["--json inspect describe"]),
    (["inspect", "whereis", "--examples"], ["-q inspect whereis"]),
    (["inspect", "check", "--examples"], ["ReceiptContext"]),
]


def _examples_id(item: tuple[list[str], list[str]]) -> str:
    """Generate a readable test ID from args."""
    args, _ = item
    return "_".join(a for a in args if a != "--examples")


@pytest.mark.usefixtures("_isolated_project")
@pytest.mark.parametrize(
    "args,expected_keywords",
    EXAMPLES_COMMANDS,
    ids=[_examples_id(item) for item in EXAMPLES_COMMANDS],
)
def test_examples_flag(
    cli_runner: CliRunner, args: list[str], expected_keywords: list[str]
) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Examples for" in result.output
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in examples output for {args}"


@pytest.mark.usefixtures("_isolated_project")
class TestExamplesInHelp:
    @pytest.mark.parametrize(
        "args",
        [["inspect", "--help"], ["inspect", "describe", "--help"], ["inspect", "check", "--help"]],
    )
    def test_examples_in_help(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "--examples" in result.output
