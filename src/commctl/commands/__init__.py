"""Subcommand modules for commctl.

Provides register_commands() which uses deferred imports to keep
``commctl --help`` fast as the codebase grows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    3 groups (have subcommands) + 3 standalone commands.
    """
    # --- Groups ---
    from commctl.commands.artist import artist
    from commctl.commands.commission import commission
    from commctl.commands.customer import customer

    cli.add_command(artist)
    cli.add_command(customer)
    cli.add_command(commission)

    # --- Standalone commands ---
    from commctl.commands.check import check
    from commctl.commands.init_cmd import init_cmd
    from commctl.commands.upgrade import upgrade

    cli.add_command(check)
    cli.add_command(init_cmd)
    cli.add_command(upgrade)
