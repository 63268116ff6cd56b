"""shpipe CLI main entry point with global options."""

import click

from ..config import SeparatorMatch, resolve_config
from ..context import ShpipeContext


@click.group()
@click.option(
    "--separator-match",
    type=click.Choice([m.value for m in SeparatorMatch]),
    help="How '|' arguments are recognised (overrides $SHPIPE_SEPARATOR_MATCH)",
)
@click.option(
    "--no-glob",
    is_flag=True,
    help="Pass arguments through without wildcard expansion",
)
@click.option(
    "--terminal-only",
    is_flag=True,
    help="Only wait on the last stage of the pipeline",
)
@click.option("-v", "--verbose", is_flag=True, help="Trace launched stages")
@click.pass_context
def cli(ctx, separator_match, no_glob, terminal_only, verbose):
    """shpipe - run pipelines of external programs."""
    ctx.ensure_object(ShpipeContext)

    try:
        ctx.obj.config = resolve_config(
            separator_match=separator_match,
            glob=False if no_glob else None,
            reap_all=False if terminal_only else None,
            verbose=True if verbose else None,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e


# Register commands at module level so tests can import cli with commands attached
from .commands.expand import expand  # noqa: E402
from .commands.run import run  # noqa: E402

cli.add_command(run)
cli.add_command(expand)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
