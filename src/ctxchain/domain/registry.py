"""Context class registry.

Every :class:`~ctxchain.domain.context.BaseContext` subclass registers
itself under its class name when it is defined, so request-level code
can extend a chain by name (``extend_context("Order", ...)``) without
importing the class.  Plugins add classes through the
``register_context_classes`` hook.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ctxchain.domain.context import BaseContext

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_SUFFIX = "Context"

CONTEXT_REGISTRY: dict[str, type[BaseContext]] = {}


def register_context(
    name: str,
    context_cls: type[BaseContext],
    *,
    replace: bool = False,
) -> None:
    """Register *context_cls* under *name*.

    Class definition registers with ``replace=True`` so that reloading a
    module rebinds the name.  Explicit registrations (plugins) refuse to
    shadow a different class already registered under the same name.

    Raises:
        ValueError: If *name* is empty or already taken by another class.
        TypeError: If *context_cls* is not a BaseContext subclass.
    """
    from ctxchain.domain.context import BaseContext

    normalized = name.strip()
    if not normalized:
        msg = "Context name must not be empty"
        raise ValueError(msg)

    if not (isinstance(context_cls, type) and issubclass(context_cls, BaseContext)):
        msg = f"Context {normalized!r} must extend BaseContext"
        raise TypeError(msg)

    existing = CONTEXT_REGISTRY.get(normalized)
    if existing is not None and existing is not context_cls and not replace:
        msg = f"Context {normalized!r} is already registered"
        raise ValueError(msg)

    CONTEXT_REGISTRY[normalized] = context_cls
    logger.debug("Registered context class %s", normalized)


def get_context_class(
    name: str,
    *,
    suffix: str = DEFAULT_CONTEXT_SUFFIX,
) -> type[BaseContext]:
    """Look up a context class by name.

    ``"Order"`` resolves to ``OrderContext`` when no class is registered
    under the bare name.

    Raises:
        KeyError: If neither the bare nor the suffixed name is registered.
    """
    if name in CONTEXT_REGISTRY:
        return CONTEXT_REGISTRY[name]
    suffixed = f"{name}{suffix}"
    if suffixed in CONTEXT_REGISTRY:
        return CONTEXT_REGISTRY[suffixed]
    msg = f"No context class registered for {name!r} or {suffixed!r}"
    raise KeyError(msg)
