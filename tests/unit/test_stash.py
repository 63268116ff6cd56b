"""Tests for stash block storage."""

import pytest

from shpipe.errors import StaleBlockError
from shpipe.stash import Stash


def test_allocate_returns_zeroed_block():
    """Allocated blocks have the requested capacity and no used bytes."""
    stash = Stash()
    block = stash.allocate(16)

    assert block.capacity == 16
    assert block.length == 0
    assert block.buffer == bytearray(16)
    assert len(stash) == 1


def test_blocks_are_appended_in_order():
    """Each allocation gets the next index."""
    stash = Stash()
    first = stash.allocate(1)
    second = stash.allocate(2)

    assert (first.index, second.index) == (0, 1)
    assert stash.owns(first)
    assert stash.owns(second)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        Stash().allocate(-1)


def test_store_and_read_back(stash):
    """Strings and bytes round trip through blocks."""
    assert stash.store_bytes(b"raw").as_bytes() == b"raw"
    assert stash.store_str("héllo").as_str() == "héllo"


def test_store_strv_is_contiguous(stash):
    """A vector is stored in one block with NUL-terminated entries."""
    block = stash.store_strv(["ls", "-l", ""])

    assert block.as_bytes() == b"ls\0-l\0\0"
    assert block.as_strv() == ["ls", "-l", ""]


def test_store_empty_strv(stash):
    assert stash.store_strv([]).as_strv() == []


def test_store_strv_rejects_nul(stash):
    with pytest.raises(ValueError):
        stash.store_strv(["a\0b"])


def test_append_beyond_capacity_rejected(stash):
    block = stash.allocate(2)
    with pytest.raises(ValueError):
        block.append(b"abc")


def test_grow_keeps_data(stash):
    """Growing a block preserves the bytes already written."""
    block = stash.allocate(2)
    block.append(b"ab")
    stash.grow(block, 4)
    block.append(b"cd")

    assert block.capacity == 4
    assert block.as_bytes() == b"abcd"


def test_grow_foreign_block_rejected():
    ours = Stash()
    theirs = Stash()
    block = theirs.allocate(1)
    ours.allocate(1)

    with pytest.raises(ValueError):
        ours.grow(block, 8)


def test_release_invalidates_blocks():
    """Blocks cannot be read after their stash was released."""
    stash = Stash()
    block = stash.store_str("gone")
    stash.release()

    assert stash.empty
    assert not block.valid
    with pytest.raises(StaleBlockError):
        block.as_str()


def test_release_twice_is_noop():
    """A second release leaves the stash empty without errors."""
    stash = Stash()
    stash.store_str("x")
    stash.release()
    stash.release()

    assert stash.empty
    assert len(stash) == 0


def test_release_empty_stash():
    stash = Stash()
    stash.release()
    assert stash.empty


def test_stash_reusable_after_release():
    stash = Stash()
    stash.store_str("one")
    stash.release()
    block = stash.store_str("two")

    assert block.index == 0
    assert block.as_str() == "two"


def test_context_manager_releases():
    with Stash() as stash:
        block = stash.store_str("scoped")
    assert stash.empty
    assert not block.valid
