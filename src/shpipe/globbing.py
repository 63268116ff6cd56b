"""Pathname wildcard expansion of argument vectors.

Every argument before the first literal ``--`` is treated as a pattern:

- brace groups are expanded first (``{a,b}.txt`` -> ``a.txt b.txt``)
- a leading ``~`` or ``~user`` becomes that user's home directory
- a plain word without ``*``, ``?`` or ``[`` is kept literally, but once
  braces have been expanded each alternative must exist or match
- matched directories, literal ones included, get a trailing ``/``
- an argument that matches nothing is passed through unchanged

Arguments after ``--`` are appended untouched and ``--`` itself is dropped.
"""

from __future__ import annotations

import glob
import os
import re
from typing import Iterator, List, Sequence

from .errors import ExpansionError

TERMINATOR = "--"

_MAGIC = re.compile(r"[*?[]")


def has_magic(pattern: str) -> bool:
    """Check if a pattern contains wildcard metacharacters."""
    return _MAGIC.search(pattern) is not None


def _scan(pattern: str, start: int) -> Iterator[tuple[int, str]]:
    """Yield (index, char) pairs, skipping backslash-escaped characters."""
    i = start
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        yield i, ch
        i += 1


def _find_open(pattern: str, start: int) -> int:
    for i, ch in _scan(pattern, start):
        if ch == "{":
            return i
    return -1


def _find_close(pattern: str, begin: int) -> int:
    """Return the index of the ``}`` matching ``pattern[begin]``, or -1."""
    depth = 0
    for i, ch in _scan(pattern, begin):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _split_alternatives(body: str) -> List[str]:
    """Split a brace body on commas that are not nested in inner braces."""
    parts = []
    depth = 0
    last = 0
    for i, ch in _scan(body, 0):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(body[last:i])
            last = i + 1
    parts.append(body[last:])
    return parts


def expand_braces(pattern: str) -> List[str]:
    """Expand brace groups in ``pattern``.

    ``{}`` and unbalanced braces are literal. A group with one alternative
    still loses its braces (``{a}`` -> ``a``).

    Args:
        pattern: Pattern possibly containing brace groups

    Returns:
        Alternatives in left-to-right order
    """
    begin = _find_open(pattern, 0)
    while begin != -1:
        end = _find_close(pattern, begin)
        if end == -1:
            return [pattern]
        if end > begin + 1:
            break
        begin = _find_open(pattern, end + 1)
    else:
        return [pattern]

    prefix = pattern[:begin]
    suffix = pattern[end + 1:]
    expanded: List[str] = []
    for alternative in _split_alternatives(pattern[begin + 1:end]):
        expanded.extend(expand_braces(prefix + alternative + suffix))
    return expanded


def _mark(path: str) -> str:
    if not path.endswith("/") and os.path.isdir(path):
        return path + "/"
    return path


def expand_pattern(pattern: str) -> List[str]:
    """Expand one argument into its list of matches.

    Raises:
        ExpansionError: The filesystem walk failed for this pattern
    """
    matches: List[str] = []
    try:
        alternatives = expand_braces(pattern)
        braced = alternatives != [pattern]
        for alternative in alternatives:
            candidate = os.path.expanduser(alternative)
            if not has_magic(candidate):
                # Brace alternatives only count when they name a real path
                if not braced or os.path.lexists(candidate):
                    matches.append(_mark(candidate))
                continue
            found = sorted(glob.glob(candidate))
            matches.extend(_mark(path) for path in found)
    except (OSError, ValueError) as exc:
        raise ExpansionError(pattern, exc) from exc

    if not matches:
        return [pattern]
    return matches


class GlobResultSet:
    """Per-argument match lists for one expansion call.

    Entries line up 1:1 with the arguments preceding ``--``. The set is
    released by the expander as soon as its data has been copied out.
    """

    def __init__(self) -> None:
        self.entries: List[List[str]] = []
        self.released = False

    def __enter__(self) -> "GlobResultSet":
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, matches: List[str]) -> None:
        if self.released:
            raise RuntimeError("glob result set already released")
        self.entries.append(matches)

    def flatten(self) -> List[str]:
        return [path for matches in self.entries for path in matches]

    def release(self) -> None:
        self.entries = []
        self.released = True


def split_terminator(args: Sequence[str]) -> tuple[List[str], List[str]]:
    """Split ``args`` at the first ``--`` into (glob-eligible, literal)."""
    args = list(args)
    try:
        cut = args.index(TERMINATOR)
    except ValueError:
        return args, []
    return args[:cut], args[cut + 1:]


def expand(args: Sequence[str]) -> List[str]:
    """Expand wildcard patterns in an argument vector.

    Args:
        args: Argument vector, optionally containing a literal ``--``

    Returns:
        New list owned by the caller

    Raises:
        ExpansionError: Any single pattern failed; nothing is returned
    """
    patterns, literal = split_terminator(args)
    with GlobResultSet() as results:
        for pattern in patterns:
            results.add(expand_pattern(pattern))
        expanded = results.flatten()
    expanded.extend(literal)
    return expanded


__all__ = [
    "GlobResultSet",
    "TERMINATOR",
    "expand",
    "expand_braces",
    "expand_pattern",
    "has_magic",
    "split_terminator",
]
