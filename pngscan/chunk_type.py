# chunk_type.py

from __future__ import annotations

from typing import Union

# Property bit inside each type byte (lowercase letter when set)
PROPERTY_BIT = 0x20


def _is_letter(b: int) -> bool:
    return 0x41 <= b <= 0x5A or 0x61 <= b <= 0x7A


class ChunkTypeCode:
    """
    Four-byte chunk type. Byte 0..3 property bits, in order:
    ancillary, private, reserved, safe-to-copy.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: Union[bytes, bytearray, memoryview, str]) -> None:
        if isinstance(raw, str):
            raw = raw.encode("latin-1")
        raw = bytes(raw)
        if len(raw) != 4:
            raise ValueError(f"chunk type must be 4 bytes, got {len(raw)}")
        object.__setattr__(self, "_raw", raw)

    def __setattr__(self, name, value):
        raise AttributeError("ChunkTypeCode is immutable")

    @property
    def raw(self) -> bytes:
        return self._raw

    # Every byte must be an ASCII letter
    def is_valid(self) -> bool:
        return all(_is_letter(b) for b in self._raw)

    def is_critical(self) -> bool:
        return not (self._raw[0] & PROPERTY_BIT)

    def is_ancillary(self) -> bool:
        return not self.is_critical()

    def is_public(self) -> bool:
        return not (self._raw[1] & PROPERTY_BIT)

    def is_private(self) -> bool:
        return not self.is_public()

    # Must be clear in conforming files; exposed but never enforced here
    def is_reserved_bit_set(self) -> bool:
        return bool(self._raw[2] & PROPERTY_BIT)

    def is_safe_to_copy(self) -> bool:
        return bool(self._raw[3] & PROPERTY_BIT)

    def __eq__(self, other) -> bool:
        if isinstance(other, ChunkTypeCode):
            return self._raw == other._raw
        if isinstance(other, (bytes, bytearray)):
            return self._raw == bytes(other)
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._raw)

    def __str__(self) -> str:
        return self._raw.decode("latin-1")

    def __repr__(self) -> str:
        return f"ChunkTypeCode({self._raw!r})"


IHDR = ChunkTypeCode(b"IHDR")
PLTE = ChunkTypeCode(b"PLTE")
IDAT = ChunkTypeCode(b"IDAT")
IEND = ChunkTypeCode(b"IEND")


__all__ = ["ChunkTypeCode", "PROPERTY_BIT", "IHDR", "PLTE", "IDAT", "IEND"]
