"""Pipeline splitting and the ``cd`` built-in.

A flat, already expanded argument vector is cut into stages wherever an
argument is a separator. With the default ``leading`` policy any argument
starting with ``|`` ends the current stage (and the rest of that argument
is discarded); the ``token`` policy only accepts a bare ``|``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import SeparatorMatch, ShellConfig
from .errors import BuiltinError

BUILTIN_CD = "cd"


@dataclass(frozen=True)
class PipelineStage:
    """One program invocation within a pipeline."""

    index: int
    argv: Tuple[str, ...]
    is_first: bool
    is_last: bool

    @property
    def empty(self) -> bool:
        return not self.argv

    @property
    def program(self) -> Optional[str]:
        return self.argv[0] if self.argv else None


def is_separator(arg: str, config: ShellConfig) -> bool:
    if config.separator_match is SeparatorMatch.TOKEN:
        return arg == config.separator
    return arg[:1] == config.separator


def split_stages(
    argv: Sequence[str], config: Optional[ShellConfig] = None
) -> List[PipelineStage]:
    """Partition ``argv`` into stages.

    Always returns separator count + 1 stages; stages may be empty when
    separators are adjacent or trailing.

    Args:
        argv: Expanded argument vector
        config: Separator settings (defaults apply when omitted)

    Returns:
        Stages in pipeline order
    """
    config = config or ShellConfig()
    groups: List[List[str]] = [[]]
    for arg in argv:
        if is_separator(arg, config):
            groups.append([])
        else:
            groups[-1].append(arg)

    last = len(groups) - 1
    return [
        PipelineStage(
            index=i, argv=tuple(group), is_first=i == 0, is_last=i == last
        )
        for i, group in enumerate(groups)
    ]


def runnable_stages(stages: Sequence[PipelineStage]) -> List[PipelineStage]:
    """Drop empty stages and recompute first/last over the rest."""
    kept = [stage for stage in stages if not stage.empty]
    last = len(kept) - 1
    return [
        PipelineStage(
            index=i, argv=stage.argv, is_first=i == 0, is_last=i == last
        )
        for i, stage in enumerate(kept)
    ]


def is_builtin_cd(stages: Sequence[PipelineStage]) -> bool:
    return bool(stages) and stages[0].program == BUILTIN_CD


def change_directory(argv: Sequence[str]) -> str:
    """Run ``cd [dir]`` in the calling process.

    Stages after the first and arguments past ``dir`` are ignored.

    Returns:
        The directory that was entered

    Raises:
        BuiltinError: ``$HOME`` is unset or the directory change failed
    """
    if len(argv) > 1:
        target = argv[1]
    else:
        target = os.environ.get("HOME")
        if not target:
            raise BuiltinError("cd: HOME not set")

    try:
        os.chdir(target)
    except OSError as exc:
        raise BuiltinError(f"cd: {target}: {exc.strerror or exc}") from exc
    return target


__all__ = [
    "BUILTIN_CD",
    "PipelineStage",
    "change_directory",
    "is_builtin_cd",
    "is_separator",
    "runnable_stages",
    "split_stages",
]
