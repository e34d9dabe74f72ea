"""ViewHelperProxy — the only door from a rendering surface into a chain.

A template or view object should see the names the chain declares as
view helpers and nothing else.  The proxy asks the chain before
forwarding; every other lookup is an ordinary ``AttributeError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ctxchain.domain.context import BaseContext


class ViewHelperProxy:
    """Expose only the view helpers declared somewhere in *context*'s chain."""

    __slots__ = ("_context",)

    def __init__(self, context: BaseContext) -> None:
        self._context = context

    @property
    def context(self) -> BaseContext:
        return self._context

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("_") and self._context.has_view_helper(name):
            return getattr(self._context, name)
        msg = f"{name!r} is not a view helper of {type(self._context).__name__}"
        raise AttributeError(msg)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._context.has_view_helper(name)

    def __repr__(self) -> str:
        return f"<ViewHelperProxy for {self._context!r}>"
