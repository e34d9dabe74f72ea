"""Domain layer — the context chain itself.

This layer depends only on the standard library.
It must never import from services, infrastructure, commands, or config.
"""

from ctxchain.domain.context import BaseContext
from ctxchain.domain.declarations import Decoration, decorate
from ctxchain.domain.errors import (
    ContextError,
    MethodOverrideError,
    UnknownAttributeError,
    UnresolvedOperationError,
)
from ctxchain.domain.registry import CONTEXT_REGISTRY, get_context_class, register_context

__all__ = [
    "CONTEXT_REGISTRY",
    "BaseContext",
    "ContextError",
    "Decoration",
    "MethodOverrideError",
    "UnknownAttributeError",
    "UnresolvedOperationError",
    "decorate",
    "get_context_class",
    "register_context",
]
