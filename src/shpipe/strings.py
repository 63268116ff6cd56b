"""String helpers whose results live in a stash.

Each helper returns a :class:`~shpipe.models.Result` with an always-usable
``value``; on bad input or allocation failure the value is a fresh empty
string (or ``[]`` for vectors) and ``error`` says what went wrong.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from .models import ErrorKind, Result
from .stash import Stash


def split(stash: Stash, text: Optional[str], delims: Optional[str]) -> Result:
    """Split ``text`` on every occurrence of any character in ``delims``.

    Adjacent delimiters produce empty entries, as does a trailing one.
    """
    if text is None or delims is None:
        return Result.failure(
            ErrorKind.PARAM, "text and delims are required", []
        )

    if delims:
        parts = re.split(f"[{re.escape(delims)}]", text)
    else:
        parts = [text]

    try:
        block = stash.store_strv(parts)
    except MemoryError:
        return Result.failure(ErrorKind.ALLOC_FAIL, "split vector", [])
    except ValueError as e:
        return Result.failure(ErrorKind.PARAM, str(e), [])
    return Result.success(block.as_strv(), block=block)


def join(stash: Stash, strings: Optional[Sequence[str]]) -> Result:
    """Concatenate ``strings`` with no separator."""
    if strings is None:
        return Result.failure(ErrorKind.PARAM, "strings are required", "")
    return _store(stash, "".join(strings))


def trim(stash: Stash, text: Optional[str]) -> Result:
    """Strip leading and trailing spaces (only ``' '``)."""
    if text is None:
        return Result.failure(ErrorKind.PARAM, "text is required", "")
    return _store(stash, text.strip(" "))


def dirname(stash: Stash, path: Optional[str]) -> Result:
    """Directory part of ``path``.

    ``"file"`` -> ``"."``, ``"/file"`` -> ``"/"``, ``"a/b"`` -> ``"a"``.
    """
    if not path:
        return Result.failure(ErrorKind.PARAM, "path is required", "")

    last_slash = path.rfind("/")
    if last_slash == -1:
        # Not stored: "." is a fresh constant
        return Result.success(".")
    if last_slash == 0:
        return _store(stash, "/")
    return _store(stash, path[:last_slash])


def streq(a: Optional[str], b: Optional[str]) -> bool:
    """Equal strings; ``False`` if either is missing."""
    if a is None or b is None:
        return False
    return a == b


def strneq(a: Optional[str], b: Optional[str], length: int) -> bool:
    """Compare the first ``length`` characters; ``False`` on short input."""
    if a is None or b is None or length <= 0:
        return False
    if len(a) < length or len(b) < length:
        return False
    return a[:length] == b[:length]


def strjoin(stash: Stash, *strings: str) -> str:
    """Concatenate positional arguments into ``stash``."""
    return join(stash, strings).value


def _store(stash: Stash, text: str) -> Result:
    try:
        block = stash.store_str(text)
    except MemoryError:
        return Result.failure(ErrorKind.ALLOC_FAIL, "string", "")
    return Result.success(block.as_str(), block=block)


__all__ = ["dirname", "join", "split", "streq", "strjoin", "strneq", "trim"]
