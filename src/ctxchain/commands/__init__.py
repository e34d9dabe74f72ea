"""Subcommand modules for ctxchain.

Provides register_commands() which uses deferred imports to keep
``ctxchain --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from ctxchain.commands.inspect import inspect_group

    cli.add_command(inspect_group)
