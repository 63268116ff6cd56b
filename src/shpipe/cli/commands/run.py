"""Run command - execute an argument vector as a pipeline."""

import sys

import click

from ...context import pass_context
from ...engine import capture, run as run_pipeline
from ...models import ErrorKind, Outcome
from ...reaper import ABNORMAL_EXIT
from ...stash import Stash


@click.command(
    context_settings=dict(
        ignore_unknown_options=True, allow_interspersed_args=False
    )
)
@click.option(
    "--capture",
    "capture_output",
    is_flag=True,
    help="Read the last stage's output and print it without its final newline",
)
@click.argument("command", nargs=-1, required=True)
@pass_context
def run(ctx, capture_output, command):
    """Execute COMMAND as a pipeline of programs.

    Stages are separated by a '|' argument (quote it for your shell).
    Wildcards are expanded unless they follow a '--' argument.

    Examples:
        shpipe run ls '*.py'
        shpipe run --capture echo hello '|' wc -c
        shpipe run -- find . -name -- '*.py'

    Exits with the status of the last stage.
    """
    if capture_output:
        with Stash() as stash:
            result = capture(stash, list(command), ctx.config)
            if result.output:
                click.echo(result.output)
    else:
        result = run_pipeline(list(command), ctx.config)

    if result.outcome is Outcome.ERROR and result.error is not None:
        if result.error.kind is not ErrorKind.LAUNCH:
            click.echo(f"Error: {result.error.message}", err=True)
            sys.exit(result.returncode or 1)

    if result.returncode == ABNORMAL_EXIT:
        click.echo("Error: pipeline terminated abnormally", err=True)
        sys.exit(1)

    sys.exit(result.returncode)
