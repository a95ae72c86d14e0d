# scanner.py

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from pngscan.crc import crc32
from pngscan.errors import ChunkError, UnexpectedEnd
from pngscan.raw_chunk import MAX_CHUNK_LENGTH, RawChunk, parse_chunk

logger = logging.getLogger(__name__)

PNG_SIG = b"\x89PNG\r\n\x1a\n"
SIG_LEN = len(PNG_SIG)


def _is_png_at(buf: bytes, offset: int) -> bool:
    return buf.startswith(PNG_SIG, offset)


# Header decoded but the body or CRC ran past the end of the buffer
class TruncatedHead:
    __slots__ = ("offset", "type_code", "declared_length")

    def __init__(self, offset: int, type_code, declared_length: int) -> None:
        self.offset = offset
        self.type_code = type_code
        self.declared_length = declared_length

    def __repr__(self) -> str:
        return f"TruncatedHead(offset={self.offset}, type={self.type_code}, length={self.declared_length})"


class ScanResult:
    """
    Candidate tables from one pass over a buffer.

    signatures  ascending offsets of PNG signatures
    chunks      offset -> RawChunk for every successful chunk parse
    successors  offset -> offset + consumed length of that chunk
    unused      offsets matching nothing and lying past the high-water mark
    truncated   unused offsets whose header decoded but whose body did not fit
    """

    def __init__(self, buffer: bytes) -> None:
        self.buffer = buffer
        self.signatures: List[int] = []
        self.chunks: Dict[int, RawChunk] = {}
        self.successors: Dict[int, int] = {}
        self.unused: List[int] = []
        self.truncated: List[TruncatedHead] = []
        self.high_water = 0

    @property
    def size(self) -> int:
        return len(self.buffer)

    def __repr__(self) -> str:
        return (
            f"ScanResult(size={self.size}, signatures={len(self.signatures)}, "
            f"chunks={len(self.chunks)}, unused={len(self.unused)})"
        )


# Try a signature and a chunk parse at every offset.
# Overlapping candidates are kept; the reconstructor decides who owns the bytes.
def scan(
    buffer,
    *,
    max_length: int = MAX_CHUNK_LENGTH,
    crc_func: Callable = crc32,
) -> ScanResult:
    if not isinstance(buffer, (bytes, bytearray)):
        buffer = bytes(buffer)
    result = ScanResult(buffer)
    n = len(buffer)
    high_water = 0

    for o in range(n):
        matched = False
        head = None

        if _is_png_at(buffer, o):
            result.signatures.append(o)
            high_water = max(high_water, o + SIG_LEN)
            matched = True

        try:
            chunk, consumed = parse_chunk(buffer, o, max_length=max_length, crc_func=crc_func)
        except UnexpectedEnd as exc:
            if exc.type_code is not None:
                head = TruncatedHead(o, exc.type_code, exc.declared_length)
        except ChunkError:
            pass
        else:
            result.chunks[o] = chunk
            result.successors[o] = o + consumed
            high_water = max(high_water, o + consumed)
            matched = True
            if not chunk.crc_ok:
                logger.debug("chunk %s at %d has crc mismatch", chunk.type_code, o)

        # Inside the span of an earlier candidate does not count as unused
        if not matched and o >= high_water:
            result.unused.append(o)
            if head is not None:
                result.truncated.append(head)

    result.high_water = high_water
    logger.debug("%r", result)
    return result


__all__ = ["PNG_SIG", "SIG_LEN", "ScanResult", "TruncatedHead", "scan"]
