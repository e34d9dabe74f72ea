"""BaseContext — one layer in a chain of cooperating contexts.

A chain is built by wrapping: each layer holds a reference to its parent
and answers for the names it declares itself.  Anything else is asked of
the parent, then the grandparent, up to the root::

    root = AppContext(user=current_user)
    ctx = OrderContext.wrap(root, order=order)
    ctx.user             # resolved on AppContext
    ctx.whereis("user")  # "AppContext"

Wrapping validates the new layer's shape first: a layer may only redefine
a name the chain already exposes when it declares that name as a
decoration (see :func:`ctxchain.domain.declarations.decorate`).

View helpers are names a class marks as safe for templates.  Visibility
is inherited transitively through the chain, independent of which layer
currently owns the name.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from functools import cached_property
from typing import Any, ClassVar, Self

from ctxchain.domain.declarations import ArgExpression, Decoration, decorate
from ctxchain.domain.errors import UnresolvedOperationError
from ctxchain.domain.registry import register_context
from ctxchain.domain.surface import (
    bind_attributes,
    check_overrides,
    declared_decorations,
    declared_fields,
    is_public,
    public_surface,
)

logger = logging.getLogger(__name__)


class BaseContext:
    """Root of every context layer.

    Subclasses declare attribute fields with annotations, view helpers
    with the ``view_helpers`` class keyword, and decorations with
    :func:`~ctxchain.domain.declarations.decorate`::

        class OrderContext(BaseContext, view_helpers=["order_total"]):
            order: Order | None = None
            title = decorate(str.upper)

            def order_total(self) -> Money: ...
    """

    _view_helpers: ClassVar[frozenset[str]] = frozenset()

    def __init_subclass__(
        cls,
        *,
        view_helpers: Iterable[str] = (),
        register: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        cls._view_helpers = frozenset(view_helpers)
        for name in declared_fields(cls):
            if name not in vars(cls):
                setattr(cls, name, None)
        if register:
            register_context(cls.__name__, cls, replace=True)

    def __init__(self, parent_context: BaseContext | None = None, **attributes: Any) -> None:
        if parent_context is not None and not isinstance(parent_context, BaseContext):
            msg = f"parent_context must be a BaseContext, got {type(parent_context).__name__}"
            raise TypeError(msg)
        object.__setattr__(self, "_parent_context", parent_context)
        object.__setattr__(self, "_lock", threading.RLock())
        object.__setattr__(self, "_decorated_values", {})
        bind_attributes(self, attributes)

    # ------------------------------------------------------------------
    # Construction and declarations
    # ------------------------------------------------------------------

    @classmethod
    def wrap(cls, parent_context: BaseContext, **attributes: Any) -> Self:
        """Attach a new layer of this class on top of *parent_context*.

        Raises:
            MethodOverrideError: This class redefines names the chain
                already exposes without declaring them as decorations.
            UnknownAttributeError: No layer can bind one of *attributes*.
        """
        if not isinstance(parent_context, BaseContext):
            msg = f"Cannot wrap {type(parent_context).__name__}; expected a BaseContext"
            raise TypeError(msg)
        check_overrides(cls, parent_context)
        context = cls(parent_context=parent_context, **attributes)
        logger.debug(
            "Wrapped %s onto %s",
            cls.__name__,
            type(parent_context).__name__,
        )
        return context

    @classmethod
    def declare_view_helpers(cls, *names: str) -> None:
        cls._view_helpers = cls._view_helpers | frozenset(names)

    @classmethod
    def declares_view_helper(cls, name: str) -> bool:
        """Whether this class itself lists *name* as a view helper."""
        return name in cls._view_helpers

    @classmethod
    def view_helper_names(cls) -> frozenset[str]:
        return cls._view_helpers

    @classmethod
    def decorated_names(cls) -> frozenset[str]:
        """Names this class itself declares as decorations."""
        return frozenset(declared_decorations(cls))

    @classmethod
    def declare_decoration(
        cls,
        name: str,
        decorator: Callable[..., Any],
        *,
        args: Iterable[ArgExpression] = (),
        memoize: bool = False,
    ) -> Decoration:
        """Attach a decoration for *name* after the class body has run."""
        decoration = decorate(decorator, args=args, memoize=memoize)
        decoration.__set_name__(cls, name)
        setattr(cls, name, decoration)
        return decoration

    # ------------------------------------------------------------------
    # Chain queries
    # ------------------------------------------------------------------

    @property
    def parent_context(self) -> BaseContext | None:
        return self._parent_context

    @cached_property
    def context_class_chain(self) -> list[str]:
        """Class names from the root of the chain down to this layer."""
        parent = self._parent_context
        inherited = parent.context_class_chain if parent is not None else []
        return [*inherited, type(self).__name__]

    @cached_property
    def context_method_mapping(self) -> dict[str, str]:
        """Every public name in the chain mapped to the class that owns it."""
        parent = self._parent_context
        mapping = dict(parent.context_method_mapping) if parent is not None else {}
        owner = type(self).__name__
        for name in public_surface(type(self)):
            mapping[name] = owner
        return mapping

    def whereis(self, name: str) -> str | None:
        """Name of the class that currently supplies *name*, if any."""
        return self.context_method_mapping.get(name)

    def has_view_helper(self, name: str) -> bool:
        if type(self).declares_view_helper(name):
            return True
        parent = self._parent_context
        return parent is not None and parent.has_view_helper(name)

    def supports(self, name: str) -> bool:
        """Whether attribute access for *name* would succeed on this chain."""
        return self._find_layer(name) is not None

    def resolve(self, name: str) -> Any:
        """Look *name* up on the first layer, starting here, that defines it.

        Raises:
            UnresolvedOperationError: No layer in the chain defines *name*.
        """
        layer = self._find_layer(name)
        if layer is None:
            if not is_public(name):
                msg = f"{type(self).__name__!r} object has no attribute {name!r}"
                raise AttributeError(msg)
            raise UnresolvedOperationError(name, type(self).__name__)
        return object.__getattribute__(layer, name)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _defines(self, name: str) -> bool:
        if name in vars(self):
            return True
        return any(name in vars(klass) for klass in type(self).__mro__)

    def _decorates(self, name: str) -> bool:
        for klass in type(self).__mro__:
            if name in vars(klass):
                return isinstance(vars(klass)[name], Decoration)
        return False

    def _find_layer(self, name: str) -> BaseContext | None:
        """First layer defining *name*, provided the chain can produce a value.

        A decoration only yields a value when some ancestor supplies the
        name, so the walk continues past decorating layers until a plain
        definition is found.
        """
        if not is_public(name):
            return self if self._defines(name) else None
        found: BaseContext | None = None
        layer: BaseContext | None = self
        while layer is not None:
            if layer._defines(name):
                if found is None:
                    found = layer
                if not layer._decorates(name):
                    return found
            layer = layer._parent_context
        return None

    def __getattr__(self, name: str) -> Any:
        if not is_public(name):
            msg = f"{type(self).__name__!r} object has no attribute {name!r}"
            raise AttributeError(msg)
        if self._defines(name):
            # The getter on this layer already ran and raised; do not run it again.
            if self._find_layer(name) is None:
                raise UnresolvedOperationError(name, type(self).__name__)
            msg = f"{type(self).__name__!r} object attribute {name!r} raised AttributeError"
            raise AttributeError(msg)
        return self.resolve(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if not is_public(name):
            object.__setattr__(self, name, value)
            return
        if name == "parent_context":
            msg = "parent_context is fixed when a context is constructed"
            raise AttributeError(msg)
        bind_attributes(self, {name: value})

    def __repr__(self) -> str:
        return f"<{type(self).__name__} chain={' > '.join(self.context_class_chain)}>"


register_context(BaseContext.__name__, BaseContext, replace=True)
