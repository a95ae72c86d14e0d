# decoders/critical_view.py
# Shape-only rules for PLTE, IEND and the opaque IDAT/tRNS/sBIT payloads

from typing import List, Tuple

from pngscan.views import PayloadView


class PLTEView(PayloadView):
    TYPE_CODE = "PLTE"

    @classmethod
    def from_chunk(cls, chunk):
        # One RGB triplet per 3 bytes, at least one entry
        if chunk.length == 0 or chunk.length % 3 != 0:
            return None
        return cls(chunk.buffer, chunk.payload_offset, chunk.length)

    def entries(self) -> List[Tuple[int, int, int]]:
        raw = self._bytes(0)
        return [tuple(raw[i:i + 3]) for i in range(0, len(raw), 3)]

    def summary(self) -> dict:
        return {"entries": len(self) // 3}


class IENDView(PayloadView):
    TYPE_CODE = "IEND"
    SIZE = 0

    def summary(self) -> dict:
        return {}


class OpaqueView(PayloadView):
    # Any length; only the size is reported

    @classmethod
    def for_type(cls, chunk, type_code: str):
        view = cls(chunk.buffer, chunk.payload_offset, chunk.length)
        view.TYPE_CODE = type_code
        return view


def parse_PLTE(chunk):
    return PLTEView.from_chunk(chunk)


def parse_IEND(chunk):
    return IENDView.from_chunk(chunk)


def parse_IDAT(chunk):
    return OpaqueView.for_type(chunk, "IDAT")


def parse_tRNS(chunk):
    return OpaqueView.for_type(chunk, "tRNS")


def parse_sBIT(chunk):
    return OpaqueView.for_type(chunk, "sBIT")
