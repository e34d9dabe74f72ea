"""Command group: inspect context chains."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ctxchain.commands._base import CtxGroup
from ctxchain.services.chain import ChainService

if TYPE_CHECKING:
    from ctxchain.commands._context import AppContext

_INSPECT_EXAMPLES = """\
  ctxchain inspect describe myapp.contexts:build_checkout_chain
  ctxchain inspect describe myapp.contexts:build_checkout_chain --html > chain.html
  ctxchain inspect whereis myapp.contexts:build_checkout_chain order_total
  ctxchain inspect check myapp.contexts:build_checkout_chain myapp.contexts:ReceiptContext"""


@click.group("inspect", cls=CtxGroup, examples=_INSPECT_EXAMPLES)
@click.pass_obj
def inspect_group(app: AppContext) -> None:
    """Inspect context chains: ownership, helpers, and override conflicts."""


@inspect_group.command(
    examples="""\
  ctxchain inspect describe myapp.contexts:build_checkout_chain
  ctxchain -v inspect describe myapp.contexts:build_checkout_chain
  ctxchain --json inspect describe myapp.contexts:root_context"""
)
@click.argument("target")
@click.option("--html", "as_html", is_flag=True, help="Render the HTML debug panel instead.")
@click.pass_obj
def describe(app: AppContext, target: str, as_html: bool) -> None:
    """Show the class chain and which layer owns each name."""
    app.load_plugins()
    service = ChainService()
    if as_html:
        templates = app.settings.templates
        result = service.panel(
            target,
            templates_dir=app.settings.resolve_path(templates.directory),
            context_variable=templates.context_variable,
            autoescape=templates.autoescape,
        )
        if result.ok and not app.settings.json_output:
            click.echo(result.data["html"], nl=False)
            return
        app.emit(result)
        return
    app.emit(service.describe(target))


@inspect_group.command(
    examples="""\
  ctxchain inspect whereis myapp.contexts:build_checkout_chain order_total
  ctxchain -q inspect whereis myapp.contexts:build_checkout_chain current_user"""
)
@click.argument("target")
@click.argument("name")
@click.pass_obj
def whereis(app: AppContext, target: str, name: str) -> None:
    """Report which layer of a chain supplies NAME."""
    app.load_plugins()
    app.emit(ChainService().whereis(target, name))


@inspect_group.command(
    examples="""\
  ctxchain inspect check myapp.contexts:build_checkout_chain myapp.contexts:ReceiptContext
  ctxchain --json inspect check myapp.contexts:root_context myapp.contexts:OrderContext"""
)
@click.argument("parent_target")
@click.argument("context_target")
@click.pass_obj
def check(app: AppContext, parent_target: str, context_target: str) -> None:
    """Check that CONTEXT_TARGET can wrap PARENT_TARGET without override conflicts."""
    app.load_plugins()
    app.emit(ChainService().check(parent_target, context_target))
