"""Tests for the root ctxchain CLI."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from ctxchain import __version__
from ctxchain.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "ctxchain" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_isolated_project")
def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flag_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-c", "/tmp/ctxchain-test.toml", "--version"])
    assert result.exit_code == 0


# --- Command groups registered ---


@pytest.mark.usefixtures("_isolated_project")
@pytest.mark.parametrize("args", [["inspect"], ["inspect", "describe"], ["inspect", "whereis"]])
def test_command_registered(cli_runner: CliRunner, args: list[str]) -> None:
    result = cli_runner.invoke(cli, [*args, "--help"])
    assert result.exit_code == 0, f"{args} --help failed: {result.output}"


@pytest.mark.usefixtures("_isolated_project")
def test_inspect_in_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert "inspect" in result.output
