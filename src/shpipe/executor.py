"""Stage executor: launches pipeline stages and drains captured output.

Stages are started strictly left to right. Each stage gets an explicit
redirection plan derived only from its position and from whether output
capture was requested:

    STDIN --> [first] --> [middle] --> ... --> [last] --> STDOUT | capture

The read end of each stage's output pipe becomes the next stage's stdin
and is closed in this process right after that stage has been started.
"""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from typing import IO, List, Optional, Sequence

from .config import ShellConfig
from .errors import LaunchError
from .process_utils import format_argv, popen_with_validation
from .splitter import PipelineStage
from .stash import Stash, StashBlock

# Status recorded for a stage whose program image could not be started
EXEC_FAILURE_STATUS = 127


class Redirect(Enum):
    """Where one standard stream of a stage is connected."""

    INHERIT = "inherit"
    PIPE_IN = "pipe-in"  # previous stage's read end
    PIPE_OUT = "pipe-out"  # this stage's pipe write end


@dataclass(frozen=True)
class RedirectPlan:
    """Standard stream wiring for one stage."""

    stdin: Redirect
    stdout: Redirect

    @classmethod
    def for_stage(cls, stage: PipelineStage, capture: bool) -> "RedirectPlan":
        """Derive the plan from stage position and capture intent.

        Args:
            stage: Stage to wire
            capture: Output of the last stage is read into memory

        Returns:
            RedirectPlan for the stage
        """
        stdin = Redirect.INHERIT if stage.is_first else Redirect.PIPE_IN
        if not stage.is_last or capture:
            stdout = Redirect.PIPE_OUT
        else:
            stdout = Redirect.INHERIT
        return cls(stdin=stdin, stdout=stdout)


@dataclass
class LaunchedStage:
    """Handle for a started (or failed-to-start) stage."""

    stage: PipelineStage
    plan: RedirectPlan
    process: Optional[subprocess.Popen] = None
    error: Optional[LaunchError] = None

    @property
    def launched(self) -> bool:
        return self.process is not None

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process is not None else None

    @property
    def output(self) -> Optional[IO[bytes]]:
        """Read end of this stage's output pipe, if it has one."""
        if self.process is None:
            return None
        return self.process.stdout


class StageExecutor:
    """Starts pipeline stages and reads the terminal stage's output."""

    def __init__(self, config: Optional[ShellConfig] = None):
        self.config = config or ShellConfig()

    def launch(
        self,
        stage: PipelineStage,
        upstream: Optional[IO[bytes]],
        capture: bool,
    ) -> LaunchedStage:
        """Start one stage.

        A program that cannot be started is reported on stderr and recorded
        on the returned handle; the pipeline carries on without it.

        Args:
            stage: Stage to start
            upstream: Read end of the previous stage's output pipe
            capture: Output of the last stage is read into memory

        Returns:
            LaunchedStage handle
        """
        plan = RedirectPlan.for_stage(stage, capture)

        stdin: Optional[int | IO[bytes]] = None
        if plan.stdin is Redirect.PIPE_IN:
            # An upstream stage that never started yields empty input
            stdin = upstream if upstream is not None else subprocess.DEVNULL
        stdout = subprocess.PIPE if plan.stdout is Redirect.PIPE_OUT else None

        if self.config.verbose:
            print(f"  Running: {format_argv(stage.argv)}", file=sys.stderr)

        handle = LaunchedStage(stage=stage, plan=plan)
        try:
            handle.process = popen_with_validation(
                stage.argv, stdin=stdin, stdout=stdout
            )
        except (OSError, ValueError) as e:
            handle.error = LaunchError(stage.argv, e)
            print(f"shpipe: {handle.error}", file=sys.stderr, flush=True)
        finally:
            # The child holds its own copy now
            if upstream is not None:
                upstream.close()

        return handle

    def launch_all(
        self, stages: Sequence[PipelineStage], capture: bool = False
    ) -> List[LaunchedStage]:
        """Start every stage, threading each output pipe into the next."""
        launched: List[LaunchedStage] = []
        upstream: Optional[IO[bytes]] = None
        for stage in stages:
            handle = self.launch(stage, upstream, capture)
            launched.append(handle)
            upstream = None if stage.is_last else handle.output
        return launched

    def drain(self, handle: LaunchedStage, stash: Stash) -> StashBlock:
        """Read the stage's output pipe to EOF into a stash block.

        The block starts at ``capture_initial_size`` bytes and doubles when
        full. Exactly one trailing newline is stripped.
        """
        block = stash.allocate(self.config.capture_initial_size)
        stream = handle.output
        if stream is None:
            return block

        try:
            fd = stream.fileno()
            while True:
                if block.free == 0:
                    stash.grow(block, max(block.capacity * 2, 1))
                chunk = os.read(fd, block.free)
                if not chunk:
                    break
                block.append(chunk)
        finally:
            stream.close()

        if block.length and block.buffer[block.length - 1] == ord("\n"):
            block.truncate(block.length - 1)
        return block

    def close_output(self, handle: LaunchedStage) -> None:
        """Close an unconsumed output pipe."""
        stream = handle.output
        if stream is not None and not stream.closed:
            stream.close()


__all__ = [
    "EXEC_FAILURE_STATUS",
    "LaunchedStage",
    "Redirect",
    "RedirectPlan",
    "StageExecutor",
]
