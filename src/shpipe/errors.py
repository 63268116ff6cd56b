"""Exceptions raised inside the shpipe engine.

Public entry points in :mod:`shpipe.engine` translate these into
:class:`shpipe.models.Result` values; only :class:`ReapError` is allowed to
end the orchestrating process.
"""

from typing import Optional, Sequence


class ShpipeError(Exception):
    """Base class for shpipe errors."""

    pass


class StaleBlockError(ShpipeError):
    """A stash block was read after its stash was released."""

    pass


class ExpansionError(ShpipeError):
    """Wildcard expansion of a single pattern failed."""

    def __init__(self, pattern: str, cause: Optional[BaseException] = None):
        self.pattern = pattern
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"glob expansion failed for {pattern!r}{detail}")


class LaunchError(ShpipeError):
    """A pipeline stage could not be started."""

    def __init__(self, argv: Sequence[str], cause: BaseException):
        self.argv = list(argv)
        self.cause = cause
        reason = getattr(cause, "strerror", None) or str(cause)
        name = self.argv[0] if self.argv else ""
        super().__init__(f"cannot execute {name!r}: {reason}")


class BuiltinError(ShpipeError):
    """A built-in command (``cd``) failed in the calling process."""

    pass


class ReapError(ShpipeError):
    """Waiting on a child process failed."""

    def __init__(self, pid: int, cause: OSError):
        self.pid = pid
        self.cause = cause
        super().__init__(f"waitpid({pid}) failed: {cause}")


__all__ = [
    "BuiltinError",
    "ExpansionError",
    "LaunchError",
    "ReapError",
    "ShpipeError",
    "StaleBlockError",
]
