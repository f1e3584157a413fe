"""Click base classes that add an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints copy-pasteable invocations
for the command and exits.
"""

from __future__ import annotations

from typing import Any

import click


def _examples_option(examples: str) -> click.Option:
    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{examples}")
            ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )


class _ExamplesMixin:
    """Accepts an ``examples`` keyword and registers the eager flag."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class CommCommand(_ExamplesMixin, click.Command):
    """Command with optional ``--examples``."""


class CommGroup(_ExamplesMixin, click.Group):
    """Group with optional ``--examples``.

    Subcommands declared through the group are :class:`CommCommand`, so
    they take ``examples=`` without ``cls=``.
    """

    command_class = CommCommand
