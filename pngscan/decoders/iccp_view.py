# decoders/iccp_view.py

from pngscan.views import PayloadView


# Latin-1 printable range allowed in profile names and keywords
def _name_byte_ok(b: int) -> bool:
    return 0x20 <= b <= 0x7E or 0xA1 <= b <= 0xFF


# No leading, trailing or consecutive spaces: every space-delimited piece is non-empty
def name_segments_ok(name: bytes) -> bool:
    return all(part for part in name.split(b" "))


class iCCPView(PayloadView):
    """
    Profile name, NUL, compression method (1 byte), compressed profile.

    Offsets of the separator and profile are located once at construction and
    kept as plain integers into the payload.
    """

    TYPE_CODE = "iCCP"

    def __init__(self, buffer, offset: int, length: int, name_end: int) -> None:
        super().__init__(buffer, offset, length)
        self._name_end = name_end

    @classmethod
    def from_chunk(cls, chunk):
        view = PayloadView(chunk.buffer, chunk.payload_offset, chunk.length)
        nul = view._find_nul(0)
        # Need the separator and the compression method byte after it
        if nul == -1 or nul + 1 >= chunk.length:
            return None
        return cls(chunk.buffer, chunk.payload_offset, chunk.length, nul)

    @property
    def name(self) -> bytes:
        return self._bytes(0, self._name_end)

    @property
    def compression_method(self) -> int:
        return self._u8(self._name_end + 1)

    @property
    def profile_length(self) -> int:
        return self._length - (self._name_end + 2)

    def compressed_profile(self) -> bytes:
        return self._bytes(self._name_end + 2)

    def is_valid(self) -> bool:
        name = self.name
        return (
            all(_name_byte_ok(b) for b in name)
            and name_segments_ok(name)
            and self.compression_method == 0
        )

    def summary(self) -> dict:
        return {
            "name": self.name.decode("latin-1"),
            "compression_method": self.compression_method,
            "profile_length": self.profile_length,
        }


def parse_iCCP(chunk):
    return iCCPView.from_chunk(chunk)
