"""Class-level declarations: decorations of ancestor values.

A decoration replaces one name on a context class with a descriptor that
asks the *parent* layer for the same name and wraps the result in a
decorator type::

    class PriceContext(BaseContext):
        price = decorate(Money, args=[lambda ctx: ctx._currency()], memoize=True)

Each argument expression is a callable that receives the declaring
instance, so it may reach private helpers the parent cannot see.

The decorated member mirrors the parent member's shape.  When the parent
resolves the name to a bound method, the decoration is a zero-argument
method; otherwise it reads like a plain attribute.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from ctxchain.domain.errors import UnresolvedOperationError

if TYPE_CHECKING:
    from ctxchain.domain.context import BaseContext

ArgExpression = Callable[["BaseContext"], Any]


class Decoration:
    """Descriptor that wraps the parent layer's value for one name."""

    def __init__(
        self,
        decorator: Callable[..., Any],
        *,
        args: Iterable[ArgExpression] = (),
        memoize: bool = False,
    ) -> None:
        if not callable(decorator):
            msg = f"Decorator must be callable, got {decorator!r}"
            raise TypeError(msg)
        self.decorator = decorator
        self.args: tuple[ArgExpression, ...] = tuple(args)
        for expr in self.args:
            if not callable(expr):
                msg = f"Decoration argument expressions must be callables, got {expr!r}"
                raise TypeError(msg)
        self.memoize = memoize
        self.name: str | None = None
        self.owner: type | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.owner = owner
        self.name = name

    def __repr__(self) -> str:
        decorator = getattr(self.decorator, "__name__", repr(self.decorator))
        return f"<Decoration {self.name!r} with {decorator} memoize={self.memoize}>"

    def __get__(self, instance: BaseContext | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        if not self.memoize:
            target = getattr(self._parent_of(instance), self._require_name())
            if inspect.ismethod(target):
                return types.MethodType(lambda ctx: self._wrap(ctx, target()), instance)
            return self._wrap(instance, target)

        with instance._lock:
            cached = instance._decorated_values.get(self._require_name())
            if cached is not None:
                return self._present(instance, *cached)
            target = getattr(self._parent_of(instance), self._require_name())
            if inspect.ismethod(target):
                return types.MethodType(lambda ctx: self._memoized_call(ctx, target), instance)
            return self._store(instance, False, self._wrap(instance, target))

    def __set__(self, instance: BaseContext, value: Any) -> None:
        msg = f"Decorated attribute {self.name!r} is read-only"
        raise AttributeError(msg)

    # ------------------------------------------------------------------

    def _require_name(self) -> str:
        if self.name is None:
            msg = "Decoration was never bound to a class attribute"
            raise RuntimeError(msg)
        return self.name

    def _parent_of(self, instance: BaseContext) -> BaseContext:
        parent = instance.parent_context
        if parent is None:
            raise UnresolvedOperationError(self._require_name(), type(instance).__name__)
        return parent

    def _memoized_call(self, instance: BaseContext, target: Callable[[], Any]) -> Any:
        with instance._lock:
            cached = instance._decorated_values.get(self._require_name())
            if cached is not None:
                return cached[1]
            return self._store(instance, True, self._wrap(instance, target()))

    def _store(self, instance: BaseContext, as_method: bool, value: Any) -> Any:
        instance._decorated_values[self._require_name()] = (as_method, value)
        return value

    @staticmethod
    def _present(instance: BaseContext, as_method: bool, value: Any) -> Any:
        if as_method:
            return types.MethodType(lambda _ctx: value, instance)
        return value

    def _wrap(self, instance: BaseContext, parent_value: Any) -> Any:
        extra = [expr(instance) for expr in self.args]
        return self.decorator(parent_value, *extra)


def decorate(
    decorator: Callable[..., Any],
    *,
    args: Iterable[ArgExpression] = (),
    memoize: bool = False,
) -> Decoration:
    """Declare that a name wraps the parent layer's value in *decorator*.

    Args:
        decorator: Type or factory called as ``decorator(parent_value, *args)``.
        args: Callables evaluated against the declaring instance, in order.
        memoize: Cache the decorated value on each instance after first use.
    """
    return Decoration(decorator, args=args, memoize=memoize)
