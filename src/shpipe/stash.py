"""Stash: block storage that is released all at once.

A :class:`Stash` hands out individually sized blocks but never frees them one
by one. Callers borrow data from the blocks and call :meth:`Stash.release`
when every result produced against that stash is no longer needed. Reading a
block after its stash was released raises :class:`StaleBlockError`.

Typical use::

    with Stash() as stash:
        result = capture(stash, ["ls", "|", "wc", "-l"])
        print(result.output)
"""

from __future__ import annotations

from typing import Iterable, List

from .errors import StaleBlockError

NUL = b"\0"
ENCODING = "utf-8"


class StashBlock:
    """Handle to one block of stash memory.

    ``length`` counts the bytes in use; ``buffer`` may be larger when the
    block was allocated with spare room (see capture buffers).
    """

    __slots__ = ("index", "buffer", "length", "valid")

    def __init__(self, index: int, buffer: bytearray):
        self.index = index
        self.buffer = buffer
        self.length = 0
        self.valid = True

    def __repr__(self) -> str:
        return (
            f"StashBlock(index={self.index}, length={self.length}, "
            f"capacity={self.capacity}, valid={self.valid})"
        )

    @property
    def capacity(self) -> int:
        return len(self.buffer)

    @property
    def free(self) -> int:
        return self.capacity - self.length

    def ensure_valid(self) -> None:
        if not self.valid:
            raise StaleBlockError(f"stash block {self.index} was released")

    def append(self, data: bytes) -> None:
        """Copy ``data`` after the used region; the caller sizes the block."""
        self.ensure_valid()
        end = self.length + len(data)
        if end > self.capacity:
            raise ValueError(
                f"block {self.index} holds {self.capacity} bytes, need {end}"
            )
        self.buffer[self.length:end] = data
        self.length = end

    def truncate(self, length: int) -> None:
        self.ensure_valid()
        if not 0 <= length <= self.length:
            raise ValueError(f"cannot truncate block to {length} bytes")
        self.length = length

    def as_bytes(self) -> bytes:
        self.ensure_valid()
        return bytes(self.buffer[: self.length])

    def as_str(self) -> str:
        return self.as_bytes().decode(ENCODING, errors="replace")

    def as_strv(self) -> List[str]:
        """Decode a block written by :meth:`Stash.store_strv`."""
        data = self.as_bytes()
        if not data:
            return []
        return [
            part.decode(ENCODING, errors="replace")
            for part in data[:-1].split(NUL)
        ]


class Stash:
    """Append-only collection of blocks with whole-stash lifetime."""

    def __init__(self) -> None:
        self._blocks: List[StashBlock] = []

    def __len__(self) -> int:
        return len(self._blocks)

    def __enter__(self) -> "Stash":
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()

    @property
    def empty(self) -> bool:
        return not self._blocks

    def allocate(self, size: int) -> StashBlock:
        """Append a zeroed block able to hold ``size`` bytes.

        Raises:
            ValueError: ``size`` is negative
            MemoryError: the block could not be allocated
        """
        if size < 0:
            raise ValueError("block size must not be negative")
        block = StashBlock(index=len(self._blocks), buffer=bytearray(size))
        self._blocks.append(block)
        return block

    def grow(self, block: StashBlock, size: int) -> StashBlock:
        """Enlarge ``block`` to at least ``size`` bytes, keeping its data."""
        block.ensure_valid()
        if not self.owns(block):
            raise ValueError(f"block {block.index} belongs to another stash")
        if size > block.capacity:
            block.buffer.extend(bytes(size - block.capacity))
        return block

    def owns(self, block: StashBlock) -> bool:
        return (
            block.index < len(self._blocks)
            and self._blocks[block.index] is block
        )

    def release(self) -> None:
        """Invalidate every block and reset the stash to empty.

        Calling this on an already empty stash does nothing.
        """
        if not self._blocks:
            return
        for block in self._blocks:
            block.valid = False
            block.buffer = bytearray()
            block.length = 0
        self._blocks = []

    def store_bytes(self, data: bytes) -> StashBlock:
        block = self.allocate(len(data))
        block.append(data)
        return block

    def store_str(self, text: str) -> StashBlock:
        raw = text.encode(ENCODING, errors="surrogateescape")
        return self.store_bytes(raw)

    def store_strv(self, strings: Iterable[str]) -> StashBlock:
        """Store a string vector contiguously, each entry NUL-terminated."""
        encoded = []
        for text in strings:
            raw = text.encode(ENCODING, errors="surrogateescape")
            if NUL in raw:
                raise ValueError("vector entries cannot contain NUL bytes")
            encoded.append(raw + NUL)
        return self.store_bytes(b"".join(encoded))


__all__ = ["Stash", "StashBlock"]
