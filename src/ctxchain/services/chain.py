"""ChainService — provenance and compatibility reports for context chains.

Targets are ``package.module:attribute`` strings naming either a context
instance or a zero-argument factory that builds one, so a project can
expose its real request chain (with stub attributes) for inspection.
"""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import TemplateError

from ctxchain.domain.errors import ContextError, MethodOverrideError
from ctxchain.domain.surface import find_collisions, public_surface
from ctxchain.infrastructure.templates import (
    DEFAULT_CONTEXT_VARIABLE,
    build_template_environment,
    render_debug_panel,
)
from ctxchain.services._helpers import (
    TargetError,
    chain_layers,
    load_context,
    load_context_class,
)
from ctxchain.services.result import ServiceResult

logger = logging.getLogger(__name__)


class ChainService:
    """Read-only inspection of context chains."""

    def describe(self, target: str) -> ServiceResult:
        """Report the class chain, ownership map and view helpers of *target*."""
        op = "describe"
        try:
            context = load_context(target)
        except TargetError as exc:
            return ServiceResult.failure(op, exc.code, str(exc), target=target)
        except ContextError as exc:
            return ServiceResult.failure(op, "CHAIN_ERROR", str(exc), target=target)

        layers = [
            {
                "class": type(layer).__name__,
                "defines": public_surface(type(layer)),
                "decorates": sorted(type(layer).decorated_names()),
                "view_helpers": sorted(type(layer).view_helper_names()),
            }
            for layer in chain_layers(context)
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "head": type(context).__name__,
                "chain": list(context.context_class_chain),
                "layers": layers,
                "owners": dict(sorted(context.context_method_mapping.items())),
            },
        )

    def whereis(self, target: str, name: str) -> ServiceResult:
        """Report which layer of *target* supplies *name*."""
        op = "whereis"
        try:
            context = load_context(target)
        except TargetError as exc:
            return ServiceResult.failure(op, exc.code, str(exc), target=target)
        except ContextError as exc:
            return ServiceResult.failure(op, "CHAIN_ERROR", str(exc), target=target)

        owner = context.whereis(name)
        warnings: list[str] = []
        if owner is None and context.supports(name):
            warnings.append(f"{name!r} resolves but is not part of any layer's public surface")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": name,
                "owner": owner,
                "supported": context.supports(name),
                "view_helper": context.has_view_helper(name),
            },
            warnings=warnings,
        )

    def check(self, parent_target: str, context_target: str) -> ServiceResult:
        """Check whether a context class can be wrapped onto *parent_target*.

        Nothing is constructed; only the class shape is compared with the
        parent chain's ownership map.
        """
        op = "check"
        try:
            parent = load_context(parent_target)
            context_cls = load_context_class(context_target)
        except TargetError as exc:
            return ServiceResult.failure(op, exc.code, str(exc))
        except ContextError as exc:
            return ServiceResult.failure(op, "CHAIN_ERROR", str(exc))

        collisions = find_collisions(context_cls, parent)
        if collisions:
            error = MethodOverrideError(context_cls.__name__, collisions)
            logger.debug("Override check failed for %s: %s", context_cls.__name__, collisions)
            return ServiceResult.failure(
                op,
                "METHOD_OVERRIDE",
                str(error),
                context_class=error.context_class,
                names=error.names,
                owners={name: parent.whereis(name) for name in error.names},
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "context_class": context_cls.__name__,
                "parent": type(parent).__name__,
                "decorates": sorted(
                    name for name in context_cls.decorated_names() if parent.whereis(name)
                ),
                "chain": [*parent.context_class_chain, context_cls.__name__],
            },
        )

    def panel(
        self,
        target: str,
        *,
        templates_dir: Path | None = None,
        context_variable: str = DEFAULT_CONTEXT_VARIABLE,
        autoescape: bool = True,
    ) -> ServiceResult:
        """Render the HTML debug panel for *target*'s chain."""
        op = "panel"
        try:
            context = load_context(target)
        except TargetError as exc:
            return ServiceResult.failure(op, exc.code, str(exc), target=target)
        except ContextError as exc:
            return ServiceResult.failure(op, "CHAIN_ERROR", str(exc), target=target)

        env = build_template_environment(
            templates_dir=templates_dir,
            context_variable=context_variable,
            autoescape=autoescape,
        )
        try:
            html = render_debug_panel(env, context)
        except TemplateError as exc:
            return ServiceResult.failure(op, "TEMPLATE_ERROR", str(exc), target=target)
        return ServiceResult(ok=True, op=op, data={"html": html})
