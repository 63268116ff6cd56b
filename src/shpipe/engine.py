"""Pipeline orchestration.

Executes an argument vector as a pipeline of external programs:

    args -> glob expansion -> stage split -> launch (left to right)
         -> optional capture of the last stage -> reap

Only one orchestrating call may use a given stash at a time.
"""

from __future__ import annotations

import os
import sys
from typing import List, Optional, Sequence

from .config import ShellConfig, resolve_config
from .errors import BuiltinError, ExpansionError, ReapError
from .executor import StageExecutor
from .globbing import expand
from .models import Error, ErrorKind, Outcome, PipelineResult, Result
from .reaper import Reaper
from .splitter import (
    change_directory,
    is_builtin_cd,
    runnable_stages,
    split_stages,
)
from .stash import Stash


def _failed(
    kind: ErrorKind, message: str, returncode: int = 0
) -> PipelineResult:
    return PipelineResult(
        outcome=Outcome.ERROR,
        returncode=returncode,
        output="",
        error=Error(kind=kind, message=message),
    )


def _coerce_args(args: Sequence[object]) -> List[str]:
    """Return ``args`` as strings; path objects are converted.

    Raises:
        TypeError: An element is neither a string nor a path
    """
    coerced: List[str] = []
    for i, arg in enumerate(args):
        if isinstance(arg, os.PathLike):
            arg = os.fspath(arg)
        if not isinstance(arg, str):
            raise TypeError(
                f"argument {i} must be a string, not {type(arg).__name__}"
            )
        coerced.append(arg)
    return coerced


def _execute(
    args: Optional[Sequence[str]],
    stash: Optional[Stash],
    config: Optional[ShellConfig],
) -> PipelineResult:
    config = config or resolve_config()
    capture = stash is not None

    if args is None:
        return _failed(ErrorKind.PARAM, "argument list is required")

    try:
        args = _coerce_args(args)
    except TypeError as e:
        return _failed(ErrorKind.PARAM, str(e))

    if config.glob:
        try:
            argv = expand(args)
        except ExpansionError as e:
            return _failed(ErrorKind.EXPANSION, str(e))
    else:
        argv = list(args)

    stages = split_stages(argv, config)

    if is_builtin_cd(stages):
        try:
            change_directory(stages[0].argv)
        except BuiltinError as e:
            print(f"shpipe: {e}", file=sys.stderr, flush=True)
            return _failed(ErrorKind.BUILTIN, str(e), returncode=1)
        return PipelineResult(
            outcome=Outcome.OK, output="" if capture else None
        )

    runnable = runnable_stages(stages)
    if not runnable:
        return PipelineResult(
            outcome=Outcome.EMPTY, output="" if capture else None
        )

    executor = StageExecutor(config)
    launched = executor.launch_all(runnable, capture=capture)

    block = None
    alloc_error: Optional[MemoryError] = None
    if capture:
        try:
            block = executor.drain(launched[-1], stash)
        except MemoryError as e:
            executor.close_output(launched[-1])
            alloc_error = e

    try:
        statuses = Reaper(reap_all=config.reap_all).reap(launched)
    except ReapError as e:
        print(f"waitpid: {e.cause}", file=sys.stderr, flush=True)
        raise SystemExit(1) from e

    result = PipelineResult(
        outcome=Outcome.OK,
        returncode=statuses[-1].returncode,
        output=block.as_str() if block is not None else None,
        stages=statuses,
        block=block,
    )

    if alloc_error is not None:
        return result.model_copy(
            update={
                "outcome": Outcome.ERROR,
                "output": "",
                "error": Error(
                    kind=ErrorKind.ALLOC_FAIL, message="capture buffer"
                ),
            }
        )

    failed = [handle for handle in launched if not handle.launched]
    if failed:
        message = "; ".join(str(handle.error) for handle in failed)
        return result.model_copy(
            update={
                "outcome": Outcome.ERROR,
                "error": Error(kind=ErrorKind.LAUNCH, message=message),
            }
        )

    return result


def run(
    args: Optional[Sequence[str]], config: Optional[ShellConfig] = None
) -> PipelineResult:
    """Run ``args`` as a pipeline; the terminal stage writes to our stdout.

    Unless ``config.reap_all`` is off, the call returns only after every
    stage has exited, not just the terminal one.

    Args:
        args: Argument vector; ``|`` separates stages, ``--`` ends globbing
        config: Engine settings (resolved from the environment if omitted)

    Returns:
        PipelineResult whose ``returncode`` is the terminal stage's status
    """
    return _execute(args, None, config)


def capture(
    stash: Stash,
    args: Optional[Sequence[str]],
    config: Optional[ShellConfig] = None,
) -> PipelineResult:
    """Run ``args`` as a pipeline and capture the terminal stage's stdout.

    The captured bytes live in a block of ``stash``; ``output`` holds them
    decoded, minus one trailing newline. Like :func:`run`, it waits for every stage
    unless ``config.reap_all`` is off.
    """
    return _execute(args, stash, config)


def expand_into(stash: Stash, args: Optional[Sequence[str]]) -> Result:
    """Glob-expand ``args`` and copy the expansion into ``stash``.

    The result value is always a list; it is empty when expansion failed.
    """
    if args is None:
        return Result.failure(
            ErrorKind.PARAM, "argument list is required", []
        )

    try:
        args = _coerce_args(args)
    except TypeError as e:
        return Result.failure(ErrorKind.PARAM, str(e), [])

    try:
        expanded = expand(args)
    except ExpansionError as e:
        return Result.failure(ErrorKind.EXPANSION, str(e), [])

    try:
        block = stash.store_strv(expanded)
    except MemoryError:
        return Result.failure(ErrorKind.ALLOC_FAIL, "expansion vector", [])
    except ValueError as e:
        return Result.failure(ErrorKind.PARAM, str(e), [])

    if not expanded:
        return Result.nothing([], block=block)
    return Result.success(block.as_strv(), block=block)


def cmd(*args: str) -> int:
    """Run a pipeline given as positional arguments; return its status."""
    return run(list(args)).returncode


def strout(stash: Stash, *args: str) -> str:
    """Run a pipeline given as positional arguments; return its output."""
    result = capture(stash, list(args))
    return result.output or ""


def strexp(stash: Stash, *args: str) -> List[str]:
    """Glob-expand positional arguments into ``stash``."""
    return expand_into(stash, list(args)).value


__all__ = ["capture", "cmd", "expand_into", "run", "strexp", "strout"]
