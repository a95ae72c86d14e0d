"""Tests for the CRC32 engine."""

import pytest

from pngscan.chunk_type import ChunkTypeCode
from pngscan.crc import CRC_INIT, CRC_TABLE, CRC_XOROUT, crc32, crc32_zlib, get_crc_engine, update_crc


def test_iend_reference_vector():
    assert crc32(ChunkTypeCode(b"IEND"), b"") == 0xAE426082


def test_accepts_raw_type_bytes():
    assert crc32(b"IEND", b"") == 0xAE426082


def test_table_is_precomputed_and_immutable():
    assert isinstance(CRC_TABLE, tuple)
    assert len(CRC_TABLE) == 256
    assert CRC_TABLE[0] == 0
    assert CRC_TABLE[1] == 0x77073096
    assert CRC_TABLE[255] == 0x2D02EF8D


def test_type_and_payload_form_one_run(ihdr_payload):
    payload = ihdr_payload()
    whole = update_crc(CRC_INIT, b"IHDR" + payload) ^ CRC_XOROUT
    assert crc32(b"IHDR", payload) == whole


def test_deterministic(ihdr_payload):
    payload = ihdr_payload(width=640, height=480)
    assert crc32(b"IHDR", payload) == crc32(b"IHDR", payload)


def test_zlib_engine_agrees_with_table():
    for type_code, payload in [
        (b"IEND", b""),
        (b"IDAT", bytes(range(256)) * 3),
        (b"tEXt", b"Comment\x00hello"),
    ]:
        assert crc32_zlib(type_code, payload) == crc32(type_code, payload)


def test_payload_may_be_memoryview():
    data = b"xxIDATpayloadyy"
    view = memoryview(data)[6:13]
    assert crc32(b"IDAT", view) == crc32(b"IDAT", b"payload")


def test_get_crc_engine():
    assert get_crc_engine("table") is crc32
    assert get_crc_engine("zlib") is crc32_zlib
    with pytest.raises(ValueError):
        get_crc_engine("crc64")
