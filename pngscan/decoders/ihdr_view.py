# decoders/ihdr_view.py

from pngscan.views import PayloadView

# Layout (13 bytes):
#  0  4  width
#  4  4  height
#  8  1  bit depth
#  9  1  colour type
# 10  1  compression method
# 11  1  filter method
# 12  1  interlace method

COLOUR_TYPES = {
    0: "Greyscale",
    2: "Truecolour",
    3: "Indexed",
    4: "Greyscale with alpha",
    6: "Truecolour with alpha",
}

# Allowed bit depths per colour type
BIT_DEPTHS = {
    0: (1, 2, 4, 8, 16),
    2: (8, 16),
    3: (1, 2, 4, 8),
    4: (8, 16),
    6: (8, 16),
}

INTERLACE_METHODS = {0: None, 1: "Adam7"}


class IHDRView(PayloadView):
    TYPE_CODE = "IHDR"
    SIZE = 13

    @property
    def width(self) -> int:
        return self._u32(0)

    @property
    def height(self) -> int:
        return self._u32(4)

    @property
    def bit_depth(self) -> int:
        return self._u8(8)

    @property
    def colour_type(self) -> int:
        return self._u8(9)

    @property
    def compression_method(self) -> int:
        return self._u8(10)

    @property
    def filter_method(self) -> int:
        return self._u8(11)

    @property
    def interlace_method(self) -> int:
        return self._u8(12)

    def is_valid(self) -> bool:
        if self.width == 0 or self.height == 0:
            return False
        if self.compression_method != 0 or self.filter_method != 0:
            return False
        if self.interlace_method not in INTERLACE_METHODS:
            return False
        return self.bit_depth in BIT_DEPTHS.get(self.colour_type, ())

    def summary(self) -> dict:
        out = {
            "width": self.width,
            "height": self.height,
            "bit_depth": self.bit_depth,
            "colour_type": self.colour_type,
            "colour_type_name": COLOUR_TYPES.get(self.colour_type),
            "compression_method": self.compression_method,
            "filter_method": self.filter_method,
            "interlace_method": self.interlace_method,
        }
        if self.interlace_method in INTERLACE_METHODS:
            out["interlace"] = INTERLACE_METHODS[self.interlace_method]
        return out


def parse_IHDR(chunk):
    return IHDRView.from_chunk(chunk)
