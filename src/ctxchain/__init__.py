"""ctxchain — layered context objects for request pipelines and templates."""

from ctxchain.domain import (
    BaseContext,
    ContextError,
    MethodOverrideError,
    UnknownAttributeError,
    UnresolvedOperationError,
    decorate,
)

__version__ = "0.3.0"

__all__ = [
    "BaseContext",
    "ContextError",
    "MethodOverrideError",
    "UnknownAttributeError",
    "UnresolvedOperationError",
    "__version__",
    "decorate",
]
