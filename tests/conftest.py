"""Shared pytest fixtures for ctxchain tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from ctxchain.config.logging import unbind_chain
from ctxchain.domain.registry import CONTEXT_REGISTRY


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_registry() -> Generator[None]:
    """Undo context class registrations made while a test runs."""
    snapshot = dict(CONTEXT_REGISTRY)
    yield
    CONTEXT_REGISTRY.clear()
    CONTEXT_REGISTRY.update(snapshot)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore logger state changed by ``configure_logging`` (the CLI calls it)."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    ctx = logging.getLogger("ctxchain")
    ctx_level = ctx.level
    yield
    unbind_chain()
    root.handlers = original_handlers
    root.setLevel(original_level)
    ctx.setLevel(ctx_level)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project directory with an empty ``ctxchain.toml``.

    This is the single source of truth for the project layout used by
    config and command tests.
    """
    (tmp_path / "ctxchain.toml").write_text("", encoding="utf-8")
    (tmp_path / ".ctxchain" / "plugins").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project root so the CLI finds its config there.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.delenv("CTXCHAIN_CONFIG", raising=False)
    monkeypatch.chdir(project_root)
