# crc.py

from __future__ import annotations

import zlib
from typing import Callable, Tuple

from pngscan.chunk_type import ChunkTypeCode

# Reflected CRC-32 parameters used by PNG
CRC_POLY = 0xEDB88320
CRC_INIT = 0xFFFFFFFF
CRC_XOROUT = 0xFFFFFFFF


def make_crc_table() -> Tuple[int, ...]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            if c & 1:
                c = CRC_POLY ^ (c >> 1)
            else:
                c >>= 1
        table.append(c)
    return tuple(table)


# Built once at import, never modified
CRC_TABLE: Tuple[int, ...] = make_crc_table()


# Feed bytes into a running (not yet finalized) accumulator
def update_crc(crc: int, data) -> int:
    table = CRC_TABLE
    c = crc
    for b in data:
        c = table[(c ^ b) & 0xFF] ^ (c >> 8)
    return c


def _type_bytes(type_code) -> bytes:
    if isinstance(type_code, ChunkTypeCode):
        return type_code.raw
    return bytes(type_code)


# CRC over type code followed by payload, one continuous run
def crc32(type_code, payload) -> int:
    c = update_crc(CRC_INIT, _type_bytes(type_code))
    return update_crc(c, payload) ^ CRC_XOROUT


# Same checksum through zlib, for large buffers
def crc32_zlib(type_code, payload) -> int:
    c = zlib.crc32(_type_bytes(type_code))
    return zlib.crc32(payload, c) & 0xFFFFFFFF


CRC_ENGINES = {
    "table": crc32,
    "zlib": crc32_zlib,
}


def get_crc_engine(name: str) -> Callable:
    try:
        return CRC_ENGINES[name]
    except KeyError:
        raise ValueError(f"unknown crc engine: {name!r} (expected one of {sorted(CRC_ENGINES)})") from None


__all__ = ["CRC_TABLE", "update_crc", "crc32", "crc32_zlib", "get_crc_engine", "CRC_ENGINES"]
