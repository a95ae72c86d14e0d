# errors.py

from __future__ import annotations

from typing import Optional


# Base class for every local, per-offset decode failure
class ChunkError(ValueError):
    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset

    @property
    def kind(self) -> str:
        return type(self).__name__


# Not enough bytes left for a fixed-size field
class UnexpectedEnd(ChunkError):
    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        *,
        type_code=None,
        declared_length: Optional[int] = None,
    ) -> None:
        super().__init__(message, offset)
        # Set only when the length and type were readable but the body was not
        self.type_code = type_code
        self.declared_length = declared_length


class ChunkTooLarge(ChunkError):
    pass


class InvalidChunkType(ChunkError):
    pass


# Only raised by ensure_structurally_valid; scans record it as chunk status
class CrcMismatch(ChunkError):
    pass


class SpecViolation(ChunkError):
    pass


class ConfigError(ValueError):
    pass


__all__ = [
    "ChunkError",
    "UnexpectedEnd",
    "ChunkTooLarge",
    "InvalidChunkType",
    "CrcMismatch",
    "SpecViolation",
    "ConfigError",
]
