"""Locate and read ``ctxchain.toml``.

The file is looked up from the working directory towards the filesystem
root, the way git looks for ``.git/``.  ``CTXCHAIN_CONFIG`` names a file
directly and disables the walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "ctxchain.toml"
CONFIG_ENV_VAR = "CTXCHAIN_CONFIG"


class ConfigFileError(ValueError):
    """A config file exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid TOML in {path}: {reason}")
        self.path = path
        self.reason = reason


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``ctxchain.toml`` at or above *start*, or None.

    A set ``CTXCHAIN_CONFIG`` wins outright, even when it points at a
    file that does not exist.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        explicit = Path(override)
        return explicit if explicit.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Parse *path* into a plain table; an empty file yields ``{}``.

    Raises:
        ConfigFileError: The file is not valid TOML.
    """
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileError(path, str(exc)) from exc
