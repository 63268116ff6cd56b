"""shpipe CLI context for passing state between commands."""

from typing import Optional

import click

from .config import ShellConfig


class ShpipeContext:
    def __init__(self):
        self.config: Optional[ShellConfig] = None


pass_context = click.make_pass_decorator(ShpipeContext, ensure=True)
