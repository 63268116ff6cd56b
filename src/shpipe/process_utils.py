"""Process utilities shared by the executor and the CLI.

Wraps ``subprocess.Popen`` with argv validation so that every spawn in the
package goes through one audited call site.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Sequence
from typing import Any

CommandArg = str | os.PathLike[str]


def _normalize_command(cmd: Sequence[CommandArg]) -> list[str]:
    """Validate and normalize subprocess command arguments.

    Empty arguments are legal program arguments (``grep ""``); only the
    program name itself must be non-empty.
    """
    if not cmd:
        msg = "Command must include at least one argument"
        raise ValueError(msg)

    normalized: list[str] = []
    for arg in cmd:
        if isinstance(arg, os.PathLike):
            value = os.fspath(arg)
        elif isinstance(arg, str):
            value = arg
        else:
            msg = "Command arguments must be strings or os.PathLike"
            raise TypeError(msg)

        if "\0" in value:
            msg = "Command arguments cannot contain NUL characters"
            raise ValueError(msg)

        normalized.append(value)

    if not normalized[0]:
        msg = "Program name cannot be empty"
        raise ValueError(msg)

    return normalized


def popen_with_validation(
    cmd: Sequence[CommandArg], **kwargs: Any
) -> subprocess.Popen[Any]:
    """Run subprocess.Popen with validation to satisfy security lint checks."""
    normalized_cmd = _normalize_command(cmd)
    return subprocess.Popen(normalized_cmd, **kwargs)  # noqa: S603


def format_argv(argv: Sequence[str]) -> str:
    """Render argv for diagnostics, quoting where a shell would need it."""
    import shlex

    return " ".join(shlex.quote(arg) for arg in argv)


__all__ = ["CommandArg", "format_argv", "popen_with_validation"]
