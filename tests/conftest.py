"""Pytest fixtures for building PNG byte streams."""

import struct

import pytest

from pngscan.raw_chunk import serialize_chunk
from pngscan.scanner import PNG_SIG


def _ihdr(width=1, height=1, bit_depth=8, colour_type=2, compression=0, filter_method=0, interlace=0):
    return struct.pack(">IIBBBBB", width, height, bit_depth, colour_type, compression, filter_method, interlace)


@pytest.fixture
def make_chunk():
    """Return a factory for serialized chunks (length + type + payload + crc)."""
    return serialize_chunk


@pytest.fixture
def ihdr_payload():
    """Return a factory for 13-byte IHDR payloads."""
    return _ihdr


@pytest.fixture
def signature() -> bytes:
    return PNG_SIG


@pytest.fixture
def ihdr_chunk() -> bytes:
    """1x1 truecolour 8-bit header chunk."""
    return serialize_chunk(b"IHDR", _ihdr())


@pytest.fixture
def iend_chunk() -> bytes:
    return serialize_chunk(b"IEND", b"")


@pytest.fixture
def minimal_png(signature, ihdr_chunk, iend_chunk) -> bytes:
    """Signature + IHDR + IEND, 45 bytes."""
    return signature + ihdr_chunk + iend_chunk
