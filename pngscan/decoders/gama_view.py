# decoders/gama_view.py

from pngscan.views import PayloadView

GAMMA_SCALE = 100000


class gAMAView(PayloadView):
    TYPE_CODE = "gAMA"
    SIZE = 4

    @property
    def gamma(self) -> int:
        return self._u32(0)

    def summary(self) -> dict:
        return {"gamma": self.gamma, "gamma_value": self.gamma / GAMMA_SCALE}


def parse_gAMA(chunk):
    return gAMAView.from_chunk(chunk)
