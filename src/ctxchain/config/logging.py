"""structlog configuration for ctxchain.

Two output modes:
- Human (default): console renderer, colored when stderr is a TTY
- JSON (--log-json): structured JSON lines to stderr

Library modules log through stdlib ``logging.getLogger(__name__)``; the
``ProcessorFormatter`` gives those records the same structured fields as
native structlog events.  :func:`bind_chain` attaches the active chain to
every event emitted while a unit of work is in progress.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from ctxchain.domain.context import BaseContext

LOGGER_NAME = "ctxchain"


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output for ``ctxchain.*``. When False,
            only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(level)
    # Template compilation and hook relay chatter is never useful here.
    logging.getLogger("jinja2").setLevel(logging.WARNING)
    logging.getLogger("pluggy").setLevel(logging.WARNING)


def bind_chain(context: BaseContext) -> None:
    """Attach the head of *context*'s chain to subsequent log events."""
    structlog.contextvars.bind_contextvars(
        context_head=type(context).__name__,
        context_depth=len(context.context_class_chain),
    )


def unbind_chain() -> None:
    structlog.contextvars.unbind_contextvars("context_head", "context_depth")
