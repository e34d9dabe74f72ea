"""Pluggy hook specifications for context chain lifecycle events.

Two lifecycle events fire synchronously from
:class:`~ctxchain.infrastructure.controller.ContextController`.  One
setup-time hook lets plugins contribute context classes to the registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from ctxchain.domain.context import BaseContext

PROJECT_NAME = "ctxchain"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class CtxchainHookSpec:
    """Hook specifications for the ctxchain plugin system."""

    @hookspec
    def post_root_context(self, context: BaseContext) -> None:
        """Called after the root context for a unit of work is created."""

    @hookspec
    def post_context_wrap(self, context: BaseContext, parent: BaseContext) -> None:
        """Called after a new layer is attached to the active chain."""

    @hookspec
    def register_context_classes(self) -> dict[str, type[BaseContext]] | None:
        """Return name -> BaseContext subclass mappings to extend CONTEXT_REGISTRY."""
