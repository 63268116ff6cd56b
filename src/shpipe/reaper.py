"""Reaper: waits for pipeline stages and classifies how they ended."""

from __future__ import annotations

import os
from typing import List, Sequence

from .errors import ReapError
from .executor import EXEC_FAILURE_STATUS, LaunchedStage
from .models import StageStatus

# Reported for signal, stop, continue or any other non-exit status
ABNORMAL_EXIT = -1

WAIT_FLAGS = os.WUNTRACED | getattr(os, "WCONTINUED", 0)


def classify(status: int) -> int:
    """Map a raw wait status to an exit code in [0, 255] or ABNORMAL_EXIT."""
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    return ABNORMAL_EXIT


def is_final(status: int) -> bool:
    """A stopped or continued child is waited on again."""
    return os.WIFEXITED(status) or os.WIFSIGNALED(status)


def wait_for(pid: int) -> int:
    """Block until ``pid`` exits or is killed, and classify the result.

    Raises:
        ReapError: waitpid itself failed
    """
    while True:
        try:
            _, status = os.waitpid(pid, WAIT_FLAGS)
        except OSError as e:
            raise ReapError(pid, e) from e
        if is_final(status):
            return classify(status)


class Reaper:
    """Collects exit statuses for launched stages.

    The terminal stage is always waited on first. With ``reap_all`` the
    earlier stages are waited on afterwards so they do not linger as
    zombies; their codes are kept for diagnostics only.
    """

    def __init__(self, reap_all: bool = True):
        self.reap_all = reap_all

    def reap_stage(self, handle: LaunchedStage) -> int:
        if handle.process is None:
            return EXEC_FAILURE_STATUS
        code = wait_for(handle.process.pid)
        # Keep Popen from waiting on a pid that is already gone
        handle.process.returncode = code
        return code

    def reap(self, launched: Sequence[LaunchedStage]) -> List[StageStatus]:
        """Reap the pipeline and return one status per stage.

        Args:
            launched: Stage handles in pipeline order

        Returns:
            StageStatus list in pipeline order; the last entry is the
            terminal stage. Stages that were not reaped have no returncode.
        """
        if not launched:
            return []

        codes: List[int | None] = [None] * len(launched)
        codes[-1] = self.reap_stage(launched[-1])
        for i, handle in enumerate(launched[:-1]):
            if self.reap_all or not handle.launched:
                codes[i] = self.reap_stage(handle)

        return [
            StageStatus(
                index=handle.stage.index,
                argv=list(handle.stage.argv),
                pid=handle.pid,
                launched=handle.launched,
                returncode=code,
            )
            for handle, code in zip(launched, codes)
        ]


__all__ = ["ABNORMAL_EXIT", "Reaper", "classify", "is_final", "wait_for"]
