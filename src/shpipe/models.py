"""Result and error models returned by the shpipe entry points."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .stash import StashBlock


class Outcome(str, Enum):
    """What an operation produced."""

    OK = "ok"
    EMPTY = "empty"  # nothing to do
    ERROR = "error"


class ErrorKind(str, Enum):
    """Failure classes surfaced through results."""

    ALLOC_FAIL = "alloc_fail"
    PARAM = "param"
    EXPANSION = "expansion"
    LAUNCH = "launch"
    BUILTIN = "builtin"
    IO = "io"


class Error(BaseModel):
    """Error result from operations."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class Result(BaseModel):
    """Discriminated result of a stash-backed operation.

    ``value`` is always usable: failed operations carry a freshly built
    empty value of the expected type.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    outcome: Outcome
    value: Any = None
    error: Optional[Error] = None
    block: Optional[StashBlock] = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @classmethod
    def success(cls, value: Any, block: StashBlock | None = None) -> "Result":
        return cls(outcome=Outcome.OK, value=value, block=block)

    @classmethod
    def nothing(cls, value: Any, block: StashBlock | None = None) -> "Result":
        return cls(outcome=Outcome.EMPTY, value=value, block=block)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, value: Any) -> "Result":
        return cls(
            outcome=Outcome.ERROR,
            value=value,
            error=Error(kind=kind, message=message),
        )


class StageStatus(BaseModel):
    """Per-stage diagnostics gathered while reaping."""

    index: int
    argv: List[str]
    pid: Optional[int] = None
    launched: bool = True
    returncode: Optional[int] = None  # None when the stage was not reaped


class PipelineResult(BaseModel):
    """Outcome of running one argument vector as a pipeline.

    ``returncode`` is the terminal stage's code in [0, 255], or
    ``ABNORMAL_EXIT`` (-1) when it ended by signal or stop.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    outcome: Outcome
    returncode: int = 0
    output: Optional[str] = None
    stages: List[StageStatus] = Field(default_factory=list)
    error: Optional[Error] = None
    block: Optional[StashBlock] = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @property
    def output_bytes(self) -> bytes:
        """Raw captured bytes, read from the stash block."""
        if self.block is None:
            return b""
        return self.block.as_bytes()


__all__ = [
    "Error",
    "ErrorKind",
    "Outcome",
    "PipelineResult",
    "Result",
    "StageStatus",
]
