"""ContextController — owns the chain for one unit of work.

A web framework (or any request loop) creates one controller per
request, opens a scope, and lets handlers extend the chain by name::

    controller = ContextController(plugins=plugin_manager)
    with controller.scope(current_user=user):
        controller.extend_context("Order", order=order)
        controller.order_total()   # forwarded to the chain

Names the chain does not support raise ``AttributeError`` as usual.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from ctxchain.config.logging import bind_chain, unbind_chain
from ctxchain.config.models import ChainConfig
from ctxchain.domain.registry import get_context_class

if TYPE_CHECKING:
    from ctxchain.domain.context import BaseContext
    from ctxchain.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class NoActiveContextError(RuntimeError):
    """The controller was used outside of ``begin()``/``end()``."""


class ContextController:
    """Holds the head of the active chain and forwards lookups to it."""

    def __init__(
        self,
        *,
        config: ChainConfig | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self._config = config or ChainConfig()
        self._plugins = plugins
        self._context: BaseContext | None = None

    @property
    def context(self) -> BaseContext:
        """The current head of the chain."""
        if self._context is None:
            msg = "No active context; call begin() or use scope() first"
            raise NoActiveContextError(msg)
        return self._context

    @property
    def active(self) -> bool:
        return self._context is not None

    def begin(self, **attributes: Any) -> BaseContext:
        """Create the root context for a new unit of work."""
        root_cls = get_context_class(
            self._config.root_context,
            suffix=self._config.context_suffix,
        )
        self._context = root_cls(**attributes)
        bind_chain(self._context)
        logger.debug("Started context chain with %s", root_cls.__name__)
        if self._plugins is not None:
            self._plugins.notify_root_context(self._context)
        return self._context

    def end(self) -> None:
        """Discard the chain built for the current unit of work."""
        self._context = None
        unbind_chain()

    @contextmanager
    def scope(self, **attributes: Any) -> Iterator[BaseContext]:
        root = self.begin(**attributes)
        try:
            yield root
        finally:
            self.end()

    def extend_context(self, context: str | type[BaseContext], **attributes: Any) -> BaseContext:
        """Wrap the active chain in a new layer and make it the head.

        *context* is a class or a registered name; ``"Order"`` finds
        ``OrderContext``.
        """
        parent = self.context
        if isinstance(context, str):
            context_cls = get_context_class(context, suffix=self._config.context_suffix)
        else:
            context_cls = context
        head = context_cls.wrap(parent, **attributes)
        self._context = head
        bind_chain(head)
        if self._plugins is not None:
            self._plugins.notify_context_wrap(head, parent)
        return head

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("_"):
            context = self.__dict__.get("_context")
            if context is not None and context.supports(name):
                return getattr(context, name)
        msg = f"{type(self).__name__!r} object has no attribute {name!r}"
        raise AttributeError(msg)
