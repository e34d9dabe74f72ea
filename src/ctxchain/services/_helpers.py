"""Shared service-layer helper functions."""

from __future__ import annotations

import importlib
from typing import Any

from ctxchain.domain.context import BaseContext


class TargetError(Exception):
    """A ``module:attribute`` target could not be loaded or is the wrong kind."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


def load_object(target: str) -> Any:
    """Import ``package.module:attribute`` and return the attribute.

    Dotted attributes (``module:Factory.build``) are followed.

    Examples:
        >>> load_object("ctxchain.domain.context:BaseContext").__name__
        'BaseContext'
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        msg = f"Target {target!r} must look like 'package.module:attribute'"
        raise TargetError("INVALID_TARGET", msg)
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise TargetError("IMPORT_ERROR", f"Cannot import {module_name!r}: {exc}") from exc
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            msg = f"{module_name!r} has no attribute {attr_path!r}"
            raise TargetError("IMPORT_ERROR", msg) from exc
    return obj


def load_context(target: str) -> BaseContext:
    """Load a context instance, calling zero-argument factories.

    A :class:`BaseContext` subclass is instantiated as a bare root.
    """
    obj = load_object(target)
    if isinstance(obj, BaseContext):
        return obj
    if callable(obj):
        obj = obj()
    if isinstance(obj, BaseContext):
        return obj
    msg = f"{target!r} did not produce a BaseContext (got {type(obj).__name__})"
    raise TargetError("NOT_A_CONTEXT", msg)


def load_context_class(target: str) -> type[BaseContext]:
    obj = load_object(target)
    if isinstance(obj, type) and issubclass(obj, BaseContext):
        return obj
    msg = f"{target!r} is not a BaseContext subclass"
    raise TargetError("NOT_A_CONTEXT", msg)


def chain_layers(context: BaseContext) -> list[BaseContext]:
    """Layers of *context*'s chain, root first."""
    layers: list[BaseContext] = []
    layer: BaseContext | None = context
    while layer is not None:
        layers.append(layer)
        layer = layer.parent_context
    layers.reverse()
    return layers
