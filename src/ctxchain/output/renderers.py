"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from ctxchain.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from ctxchain.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        _render_warnings(result, console)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "whereis":
        return str(result.data.get("owner") or "")
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="ctx.ok"), Text(f"  {result.op}", style="ctx.op"))


def _field(console: Console, key: str, value: Any) -> None:
    console.print(Text(f"  {key}: ", style="ctx.key"), Text(str(value)), sep="")


def _render_warnings(result: ServiceResult, console: Console) -> None:
    for warning in result.warnings:
        console.print(Text("WARNING", style="ctx.warning"), f" {warning}", sep="")


# ── Op renderers ──────────────────────────────────────────────────────


def _render_describe(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    tree = Tree(Text(" > ".join(data.get("chain", [])), style="ctx.class"))
    for layer in data.get("layers", []):
        branch = tree.add(Text(layer["class"], style="ctx.class"))
        decorated = set(layer.get("decorates", []))
        helpers = set(layer.get("view_helpers", []))
        for name in layer.get("defines", []):
            label = Text(name, style="ctx.name")
            if name in decorated:
                label.append(" (decorates)", style="ctx.decorated")
            if name in helpers:
                label.append(" (view helper)", style="ctx.helper")
            branch.add(label)
        for name in sorted(helpers - set(layer.get("defines", []))):
            branch.add(Text(f"{name} (view helper)", style="ctx.helper"))
    console.print(tree)

    if verbose:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Name", style="ctx.name")
        table.add_column("Owner", style="ctx.class")
        for name, owner in data.get("owners", {}).items():
            table.add_row(name, owner)
        console.print(table)


def _render_whereis(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "name", data.get("name"))
    _field(console, "owner", data.get("owner") or "(not defined in this chain)")
    _field(console, "supported", data.get("supported"))
    _field(console, "view_helper", data.get("view_helper"))


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "chain", " > ".join(data.get("chain", [])))
    if data.get("decorates"):
        _field(console, "decorates", ", ".join(data["decorates"]))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="ctx.error"),
        Text(f"  {result.op}", style="ctx.op"),
        Text(" — "),
        msg,
        sep="",
    )
    if err is None:
        return
    owners = err.detail.get("owners")
    if isinstance(owners, dict):
        for name, owner in owners.items():
            _field(console, name, f"already defined by {owner}")
    elif verbose and err.detail:
        for key, value in err.detail.items():
            _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "describe": _render_describe,
    "whereis": _render_whereis,
    "check": _render_check,
}
