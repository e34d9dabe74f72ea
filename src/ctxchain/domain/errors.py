"""Error taxonomy for context chains.

All three errors are structural: they surface either when a layer is
attached (unknown attributes, override collisions) or when a call walks
off the root of the chain. None of them are retried or recovered inside
the core.
"""

from __future__ import annotations

from collections.abc import Iterable


class ContextError(Exception):
    """Base class for every error raised by the context chain."""


class UnknownAttributeError(ContextError, TypeError):
    """Construction supplied a name that no layer in the chain can bind."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown attribute: {name}")


class MethodOverrideError(ContextError):
    """A new layer redefines inherited names without declaring decorations."""

    def __init__(self, context_class: str, names: Iterable[str]) -> None:
        self.context_class = context_class
        self.names = sorted(names)
        super().__init__(
            f"{context_class} overrides methods already defined in the context chain "
            f"without declaring them as decorations: {', '.join(self.names)}"
        )


class UnresolvedOperationError(ContextError, AttributeError):
    """No layer from the head of the chain down to the root defines *name*.

    Subclasses :class:`AttributeError` so ``getattr``/``hasattr`` and
    template engines treat it like any other missing attribute.
    """

    def __init__(self, name: str, context_class: str) -> None:
        super().__init__(f"undefined method '{name}' for context chain ending in {context_class}")
        self.name = name
        self.context_class = context_class
