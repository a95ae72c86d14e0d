# decoders/phys_view.py

from pngscan.views import PayloadView

UNITS = {0: "unknown", 1: "metre"}


class pHYsView(PayloadView):
    TYPE_CODE = "pHYs"
    SIZE = 9

    @property
    def pixels_per_unit_x(self) -> int:
        return self._u32(0)

    @property
    def pixels_per_unit_y(self) -> int:
        return self._u32(4)

    @property
    def unit(self) -> int:
        return self._u8(8)

    def is_valid(self) -> bool:
        return self.unit in UNITS

    def summary(self) -> dict:
        # unit 0 only defines the aspect ratio
        return {
            "pixels_per_unit_x": self.pixels_per_unit_x,
            "pixels_per_unit_y": self.pixels_per_unit_y,
            "unit": self.unit,
            "unit_name": UNITS.get(self.unit),
        }


def parse_pHYs(chunk):
    return pHYsView.from_chunk(chunk)
