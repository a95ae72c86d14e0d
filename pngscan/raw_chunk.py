# raw_chunk.py

from __future__ import annotations

import struct
from typing import Callable, Optional, Tuple

from pngscan.chunk_type import ChunkTypeCode
from pngscan.crc import crc32
from pngscan.errors import ChunkTooLarge, CrcMismatch, InvalidChunkType, UnexpectedEnd

# Length field bound from the PNG grammar (2^31 - 1)
MAX_CHUNK_LENGTH = 0x7FFFFFFF
# length(4) + type(4)
HEADER_LEN = 8
CRC_LEN = 4


class RawChunk:
    """
    A length-prefixed, type-tagged, CRC-trailed record found in a buffer.

    The payload is not copied: the chunk keeps the buffer plus the
    (payload_offset, length) pair, and ``payload`` slices on demand.
    """

    __slots__ = ("buffer", "offset", "type_code", "length", "crc32", "computed_crc")

    def __init__(
        self,
        buffer,
        offset: int,
        type_code: ChunkTypeCode,
        length: int,
        crc: int,
        computed_crc: int,
    ) -> None:
        self.buffer = buffer
        self.offset = offset
        self.type_code = type_code
        self.length = length
        self.crc32 = crc
        self.computed_crc = computed_crc

    @property
    def payload_offset(self) -> int:
        return self.offset + HEADER_LEN

    @property
    def total_length(self) -> int:
        return HEADER_LEN + self.length + CRC_LEN

    @property
    def end(self) -> int:
        return self.offset + self.total_length

    @property
    def payload(self) -> bytes:
        start = self.payload_offset
        return bytes(self.buffer[start:start + self.length])

    @property
    def crc_ok(self) -> bool:
        return self.crc32 == self.computed_crc

    @property
    def raw_crc(self) -> bytes:
        return struct.pack(">I", self.crc32)

    def to_bytes(self) -> bytes:
        return serialize_chunk(self.type_code, self.payload, self.crc32)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RawChunk):
            return NotImplemented
        return (
            self.type_code == other.type_code
            and self.crc32 == other.crc32
            and self.payload == other.payload
        )

    def __hash__(self) -> int:
        return hash((self.type_code, self.crc32, self.length))

    def __repr__(self) -> str:
        return (
            f"RawChunk(offset={self.offset}, type={self.type_code}, "
            f"length={self.length}, crc=0x{self.crc32:08X}, crc_ok={self.crc_ok})"
        )


# Decode one chunk starting at `offset`
# Returns (chunk, consumed_length); a CRC mismatch is reported through chunk.crc_ok
def parse_chunk(
    buffer,
    offset: int,
    max_length: int = MAX_CHUNK_LENGTH,
    crc_func: Callable = crc32,
) -> Tuple[RawChunk, int]:
    n = len(buffer)
    if offset + 4 > n:
        raise UnexpectedEnd("no room for length field", offset)
    length = struct.unpack_from(">I", buffer, offset)[0]
    if offset + HEADER_LEN > n:
        raise UnexpectedEnd("no room for chunk type", offset)

    # Cheap checks first; the CRC over the payload is the expensive part
    type_code = ChunkTypeCode(buffer[offset + 4:offset + HEADER_LEN])
    if not type_code.is_valid():
        raise InvalidChunkType(f"invalid chunk type {type_code.raw!r}", offset)
    if length > max_length:
        raise ChunkTooLarge(f"declared length {length} exceeds {max_length}", offset)

    payload_start = offset + HEADER_LEN
    crc_pos = payload_start + length
    if crc_pos + CRC_LEN > n:
        raise UnexpectedEnd(
            f"{type_code} chunk needs {length + CRC_LEN} bytes, {n - payload_start} left",
            offset,
            type_code=type_code,
            declared_length=length,
        )

    stored = struct.unpack_from(">I", buffer, crc_pos)[0]
    computed = crc_func(type_code, memoryview(buffer)[payload_start:crc_pos])
    chunk = RawChunk(buffer, offset, type_code, length, stored, computed)
    return chunk, chunk.total_length


# Wire form: length + type + payload + crc (computed when not given)
def serialize_chunk(type_code, payload: bytes, crc: Optional[int] = None) -> bytes:
    if not isinstance(type_code, ChunkTypeCode):
        type_code = ChunkTypeCode(type_code)
    payload = bytes(payload)
    if crc is None:
        crc = crc32(type_code, payload)
    return struct.pack(">I", len(payload)) + type_code.raw + payload + struct.pack(">I", crc)


# Charset valid and CRC matches
def is_structurally_valid(chunk: RawChunk) -> bool:
    return chunk.type_code.is_valid() and chunk.crc_ok


def ensure_structurally_valid(chunk: RawChunk) -> RawChunk:
    if not chunk.type_code.is_valid():
        raise InvalidChunkType(f"invalid chunk type {chunk.type_code.raw!r}", chunk.offset)
    if not chunk.crc_ok:
        raise CrcMismatch(
            f"{chunk.type_code} crc 0x{chunk.crc32:08X} != computed 0x{chunk.computed_crc:08X}",
            chunk.offset,
        )
    return chunk


__all__ = [
    "MAX_CHUNK_LENGTH",
    "HEADER_LEN",
    "CRC_LEN",
    "RawChunk",
    "parse_chunk",
    "serialize_chunk",
    "is_structurally_valid",
    "ensure_structurally_valid",
]
