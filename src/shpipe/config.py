"""Engine configuration and its resolution from flags and environment.

Resolution order for every setting:
1) explicit value (CLI flag or keyword argument)
2) ``SHPIPE_*`` environment variable
3) built-in default

Reads fresh from the environment each time; nothing is cached.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

ENV_SEPARATOR_MATCH = "SHPIPE_SEPARATOR_MATCH"
ENV_NO_GLOB = "SHPIPE_NO_GLOB"
ENV_REAP_ALL = "SHPIPE_REAP_ALL"
ENV_VERBOSE = "SHPIPE_VERBOSE"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class SeparatorMatch(str, Enum):
    """How an argument is recognised as a stage separator."""

    LEADING = "leading"  # first character is the separator
    TOKEN = "token"  # whole argument equals the separator


class ShellConfig(BaseModel):
    """Settings consumed by the glob expander, splitter and executor."""

    separator: str = "|"
    separator_match: SeparatorMatch = SeparatorMatch.LEADING
    glob: bool = True
    reap_all: bool = True
    verbose: bool = False
    capture_initial_size: int = Field(default=1024, ge=1)

    @field_validator("separator")
    @classmethod
    def single_character(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("separator must be a single character")
        return v


def _env_flag(name: str) -> Optional[bool]:
    """Parse a boolean environment variable, ``None`` when unset."""
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def resolve_config(
    separator_match: Optional[str] = None,
    glob: Optional[bool] = None,
    reap_all: Optional[bool] = None,
    verbose: Optional[bool] = None,
) -> ShellConfig:
    """Build a :class:`ShellConfig` from explicit values and the environment.

    Args:
        separator_match: ``"leading"`` or ``"token"``
        glob: Expand wildcards before running
        reap_all: Wait on every stage, not only the terminal one
        verbose: Trace launched stages on stderr

    Returns:
        Validated ShellConfig

    Raises:
        ValueError: An environment variable holds an unusable value
    """
    if separator_match is None:
        separator_match = os.environ.get(ENV_SEPARATOR_MATCH) or None

    if glob is None:
        no_glob = _env_flag(ENV_NO_GLOB)
        glob = None if no_glob is None else not no_glob

    if reap_all is None:
        reap_all = _env_flag(ENV_REAP_ALL)

    if verbose is None:
        verbose = _env_flag(ENV_VERBOSE)

    values = {
        "separator_match": separator_match,
        "glob": glob,
        "reap_all": reap_all,
        "verbose": verbose,
    }
    return ShellConfig(**{k: v for k, v in values.items() if v is not None})


__all__ = ["SeparatorMatch", "ShellConfig", "resolve_config"]
