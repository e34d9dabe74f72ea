"""Tests for config discovery and parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from ctxchain.config.discovery import (
    CONFIG_FILENAME,
    ConfigFileError,
    find_config,
    read_config,
)


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CTXCHAIN_CONFIG", raising=False)


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[chain]\nroot_context = "App"\n')
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        child = tmp_path / "a" / "b" / "c"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("")
        monkeypatch.setenv("CTXCHAIN_CONFIG", str(config_file))
        assert find_config(tmp_path / "elsewhere") == config_file

    def test_env_var_pointing_nowhere(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("CTXCHAIN_CONFIG", str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestReadConfig:
    def test_reads_sections(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text(
            '[chain]\nroot_context = "AppContext"\n[templates]\nautoescape = false\n'
        )
        assert read_config(config_file) == {
            "chain": {"root_context": "AppContext"},
            "templates": {"autoescape": False},
        }

    def test_empty_file_is_an_empty_table(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        assert read_config(config_file) == {}

    def test_invalid_toml_names_the_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[chain\n")
        with pytest.raises(ConfigFileError, match="Invalid TOML") as exc_info:
            read_config(config_file)
        assert exc_info.value.path == config_file
        assert str(config_file) in str(exc_info.value)

    def test_config_file_error_is_a_value_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("chain = \n")
        with pytest.raises(ValueError):
            read_config(config_file)
