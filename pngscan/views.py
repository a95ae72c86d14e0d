# views.py

from __future__ import annotations

import struct
from typing import Any, Dict, Optional

from pngscan.errors import UnexpectedEnd


class PayloadView:
    """
    Read-only decoder over one chunk payload.

    A view never owns or copies the payload. It holds the shared buffer and an
    explicit (offset, length) pair, and every field read re-checks that the
    requested range lies inside both the payload and the buffer.
    """

    TYPE_CODE = ""
    # Exact payload size, or None when the type has a variable layout
    SIZE: Optional[int] = None

    def __init__(self, buffer, offset: int, length: int) -> None:
        self._buffer = buffer
        self._offset = offset
        self._length = length

    @classmethod
    def from_chunk(cls, chunk):
        if cls.SIZE is not None and chunk.length != cls.SIZE:
            return None
        return cls(chunk.buffer, chunk.payload_offset, chunk.length)

    def __len__(self) -> int:
        return self._length

    def _check(self, pos: int, size: int) -> int:
        if pos < 0 or size < 0 or pos + size > self._length:
            raise UnexpectedEnd(f"{self.TYPE_CODE} field at {pos}+{size} outside payload of {self._length}", self._offset)
        start = self._offset + pos
        if start + size > len(self._buffer):
            raise UnexpectedEnd(f"{self.TYPE_CODE} payload no longer inside buffer", self._offset)
        return start

    def _u8(self, pos: int) -> int:
        return self._buffer[self._check(pos, 1)]

    def _u16(self, pos: int) -> int:
        return struct.unpack_from(">H", self._buffer, self._check(pos, 2))[0]

    def _u32(self, pos: int) -> int:
        return struct.unpack_from(">I", self._buffer, self._check(pos, 4))[0]

    def _bytes(self, start: int, end: Optional[int] = None) -> bytes:
        if end is None:
            end = self._length
        base = self._check(start, end - start)
        return bytes(self._buffer[base:base + (end - start)])

    # Position of the first NUL at or after `start`, relative to the payload
    def _find_nul(self, start: int) -> int:
        if start >= self._length:
            return -1
        base = self._check(start, self._length - start)
        idx = bytes(self._buffer[base:self._offset + self._length]).find(b"\x00")
        return -1 if idx == -1 else start + idx

    def is_valid(self) -> bool:
        return True

    def summary(self) -> Dict[str, Any]:
        return {"length": self._length}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.summary()!r})"


__all__ = ["PayloadView"]
