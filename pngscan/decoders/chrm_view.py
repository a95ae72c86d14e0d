# decoders/chrm_view.py

from typing import Tuple

from pngscan.views import PayloadView

# Chromaticities are stored multiplied by 100000
CHRM_SCALE = 100000


class cHRMView(PayloadView):
    TYPE_CODE = "cHRM"
    # white, red, green, blue; x then y; u32 each
    SIZE = 2 * 4 * 4

    def _pair(self, index: int) -> Tuple[int, int]:
        return self._u32(index * 8), self._u32(index * 8 + 4)

    @property
    def white_point(self) -> Tuple[int, int]:
        return self._pair(0)

    @property
    def red(self) -> Tuple[int, int]:
        return self._pair(1)

    @property
    def green(self) -> Tuple[int, int]:
        return self._pair(2)

    @property
    def blue(self) -> Tuple[int, int]:
        return self._pair(3)

    def summary(self) -> dict:
        out = {}
        for name in ("white_point", "red", "green", "blue"):
            x, y = getattr(self, name)
            out[name] = (x, y)
            out[name + "_xy"] = (x / CHRM_SCALE, y / CHRM_SCALE)
        return out


def parse_cHRM(chunk):
    return cHRMView.from_chunk(chunk)
