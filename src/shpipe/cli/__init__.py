"""shpipe command line interface.

``cli`` and ``main`` are resolved on first access so that running
``python -m shpipe.cli.main`` does not find the module pre-imported.
"""

__all__ = ["cli", "main"]


def __getattr__(name):  # pragma: no cover - lazy import
    if name == "cli":
        from .main import cli

        return cli
    if name == "main":
        from .main import main

        return main
    raise AttributeError(name)
