"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ctxchain.toml only contains
overrides.  An empty file is a valid configuration.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from ctxchain.domain.registry import DEFAULT_CONTEXT_SUFFIX


class ChainConfig(BaseModel):
    """[chain] section."""

    model_config = {"frozen": True}

    context_suffix: str = DEFAULT_CONTEXT_SUFFIX
    root_context: str = "BaseContext"


class TemplatesConfig(BaseModel):
    """[templates] section."""

    model_config = {"frozen": True}

    directory: Path | None = None
    context_variable: str = "__context"
    autoescape: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: Path | None = None

