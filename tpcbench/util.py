"""Buffer allocation and file helpers."""

from __future__ import annotations

import sys
from typing import TextIO

DEFAULT_BUF_SIZE = 1024


class BufAllocator:
    """Hands out consecutive chunks of one shared byte buffer."""

    def __init__(self) -> None:
        self.buf = bytearray(DEFAULT_BUF_SIZE)
        self._offset = 0

    def _grow(self, n: int) -> None:
        length = 2 * (len(self.buf) - self._offset)
        length = max(length, n, DEFAULT_BUF_SIZE)
        self.buf = bytearray(length)
        self._offset = 0

    def alloc(self, n: int) -> memoryview:
        """Return a writable view of ``n`` bytes from the buffer."""
        if len(self.buf) - self._offset < n:
            self._grow(n)
        chunk = memoryview(self.buf)[self._offset:self._offset + n]
        self._offset += n
        return chunk

    def reset(self) -> None:
        """Make the whole buffer available again."""
        self._offset = 0


def create_file(path: str) -> TextIO:
    """Create or truncate ``path`` for writing; exit the process on failure."""
    try:
        return open(path, "w", newline="", encoding="utf-8")
    except OSError as exc:
        print(f"failed to create file {path}, error {exc}")
        raise SystemExit(1) from exc