"""Whole-file round trips between files and string vectors."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Sequence

from .models import ErrorKind, Result
from .stash import ENCODING, Stash


def file_to_strv(
    stash: Stash, path: Optional[str | Path], delims: Optional[str]
) -> Result:
    """Read a whole file and split it on any character in ``delims``.

    A delimiter at the very end of the file does not start an extra empty
    entry, so ``"a\\nb\\n"`` reads as ``["a", "b"]``.

    Args:
        stash: Stash that owns the returned vector
        path: File to read
        delims: Delimiter characters

    Returns:
        Result whose value is the list of entries (``[]`` on failure)
    """
    if path is None or delims is None:
        return Result.failure(
            ErrorKind.PARAM, "path and delims are required", []
        )

    try:
        text = Path(path).read_bytes().decode(ENCODING, errors="replace")
    except OSError as e:
        return Result.failure(ErrorKind.IO, f"{path}: {e.strerror or e}", [])

    if delims:
        parts = re.split(f"[{re.escape(delims)}]", text)
        if len(parts) > 1 and parts[-1] == "":
            parts.pop()
    else:
        parts = [text]

    try:
        block = stash.store_strv(parts)
    except MemoryError:
        return Result.failure(ErrorKind.ALLOC_FAIL, "file vector", [])
    except ValueError as e:
        return Result.failure(ErrorKind.PARAM, str(e), [])
    return Result.success(block.as_strv(), block=block)


def strv_to_file(
    strings: Optional[Sequence[str]],
    path: Optional[str | Path],
    delim: Optional[str],
) -> Result:
    """Write every string followed by ``delim`` to ``path`` (truncating it)."""
    if strings is None or path is None or delim is None:
        return Result.failure(
            ErrorKind.PARAM, "strings, path and delim are required", None
        )

    try:
        with open(path, "w", encoding=ENCODING) as fh:
            for text in strings:
                fh.write(text)
                fh.write(delim)
    except OSError as e:
        return Result.failure(ErrorKind.IO, f"{path}: {e.strerror or e}", None)

    if not strings:
        return Result.nothing(None)
    return Result.success(None)


__all__ = ["file_to_strv", "strv_to_file"]
