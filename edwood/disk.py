"""A temporary file holding blocks of runes, recycled through size buckets."""

from __future__ import annotations

import os
import struct
import tempfile

MAX_BLOCK = 8 * 1024
BLOCK_INCR = 256
_RUNE_SIZE = 4


def ntosize(n):
    """Return the block size holding ``n`` runes and its bucket index."""
    if n < 0 or n > MAX_BLOCK:
        raise ValueError(f"block size {n} out of range")
    size = n
    if size % BLOCK_INCR:
        size += BLOCK_INCR - size % BLOCK_INCR
    return size, size // BLOCK_INCR


class Block:
    """A region of the disk file; ``addr`` is a rune offset, ``n`` the runes in use."""

    __slots__ = ("addr", "n")

    def __init__(self, addr: int, n: int) -> None:
        self.addr = addr
        self.n = n

    def __repr__(self) -> str:
        return f"Block(addr={self.addr}, n={self.n})"


class Disk:
    """Backing store for blocks of runes, kept in a temporary file."""

    def __init__(self) -> None:
        self._file = tempfile.NamedTemporaryFile(prefix="acme", delete=False)
        self.addr = 0
        self.free: list[list[Block]] = [[] for _ in range(MAX_BLOCK // BLOCK_INCR + 1)]

    def __enter__(self) -> "Disk":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self):
        """Close and remove the temporary file."""
        name = self._file.name
        self._file.close()
        os.remove(name)

    def new_block(self, n):
        """Return a block able to hold ``n`` runes, reusing a freed one if possible."""
        size, bucket = ntosize(n)
        if self.free[bucket]:
            block = self.free[bucket].pop()
        else:
            block = Block(self.addr, n)
            self.addr += size
        block.n = n
        return block

    def release(self, block):
        """Return ``block`` to the free bucket for its size."""
        _, bucket = ntosize(block.n)
        self.free[bucket].append(block)

    def read(self, block, n):
        """Read the first ``n`` runes stored in ``block`` as a string."""
        if n > block.n:
            raise ValueError(f"read of {n} runes from block of {block.n}")
        ntosize(block.n)
        self._file.seek(block.addr * _RUNE_SIZE)
        data = self._file.read(n * _RUNE_SIZE)
        if len(data) != n * _RUNE_SIZE:
            raise OSError("short read from temporary file")
        return "".join(map(chr, struct.unpack(f"<{n}I", data)))

    def write(self, block, runes):
        """Store ``runes`` and return the block holding them.

        The block is replaced by one of a better size when the length of
        ``runes`` falls into a different bucket.
        """
        n = len(runes)
        size, _ = ntosize(block.n)
        nsize, _ = ntosize(n)
        if size != nsize:
            self.release(block)
            block = self.new_block(n)
        data = struct.pack(f"<{n}I", *map(ord, runes))
        self._file.seek(block.addr * _RUNE_SIZE)
        self._file.write(data)
        self._file.flush()
        block.n = n
        return block