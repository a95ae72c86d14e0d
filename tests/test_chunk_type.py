"""Tests for chunk type codes."""

import pytest

from pngscan.chunk_type import ChunkTypeCode


def test_critical_public_type():
    code = ChunkTypeCode(b"IHDR")
    assert code.is_valid()
    assert code.is_critical()
    assert not code.is_ancillary()
    assert code.is_public()
    assert not code.is_reserved_bit_set()
    assert not code.is_safe_to_copy()


def test_ancillary_safe_to_copy_type():
    code = ChunkTypeCode(b"tEXt")
    assert code.is_ancillary()
    assert code.is_public()
    assert code.is_safe_to_copy()


def test_private_type():
    code = ChunkTypeCode(b"prIv")
    assert code.is_ancillary()
    assert code.is_private()
    assert not code.is_reserved_bit_set()
    assert code.is_safe_to_copy()


def test_reserved_bit_is_exposed_not_enforced():
    code = ChunkTypeCode(b"IHdR")
    assert code.is_valid()
    assert code.is_reserved_bit_set()


@pytest.mark.parametrize("raw", [b"ID4T", b"IHD\x00", b"@HDR", b"[HDR", b"`HDR", b"{HDR"])
def test_charset_rejects_non_letters(raw):
    assert not ChunkTypeCode(raw).is_valid()


def test_rendering():
    code = ChunkTypeCode(b"gAMA")
    assert str(code) == "gAMA"
    assert repr(code) == "ChunkTypeCode(b'gAMA')"


def test_equality_by_content():
    assert ChunkTypeCode(b"IEND") == ChunkTypeCode("IEND")
    assert ChunkTypeCode(b"IEND") == b"IEND"
    assert ChunkTypeCode(b"IEND") == "IEND"
    assert ChunkTypeCode(b"IEND") != ChunkTypeCode(b"iEND")
    assert len({ChunkTypeCode(b"IEND"), ChunkTypeCode(bytearray(b"IEND"))}) == 1


def test_immutable():
    code = ChunkTypeCode(b"IEND")
    with pytest.raises(AttributeError):
        code._raw = b"IDAT"


def test_wrong_size():
    with pytest.raises(ValueError):
        ChunkTypeCode(b"IEN")
