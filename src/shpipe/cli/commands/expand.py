"""Expand command - show how arguments are glob-expanded."""

import sys

import click

from ...context import pass_context
from ...engine import expand_into
from ...models import Outcome
from ...stash import Stash


@click.command(
    context_settings=dict(
        ignore_unknown_options=True, allow_interspersed_args=False
    )
)
@click.argument("args", nargs=-1)
@pass_context
def expand(ctx, args):
    """Print the glob expansion of ARGS, one argument per line.

    With --no-glob the arguments are printed unchanged.
    """
    if not ctx.config.glob:
        for arg in args:
            click.echo(arg)
        return

    with Stash() as stash:
        result = expand_into(stash, list(args))
        if result.outcome is Outcome.ERROR:
            click.echo(f"Error: {result.error.message}", err=True)
            sys.exit(1)
        for arg in result.value:
            click.echo(arg)
