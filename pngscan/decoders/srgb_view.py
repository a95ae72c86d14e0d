# decoders/srgb_view.py

from pngscan.views import PayloadView

RENDERING_INTENTS = {
    0: "Perceptual",
    1: "Relative colorimetric",
    2: "Saturation",
    3: "Absolute colorimetric",
}


class sRGBView(PayloadView):
    TYPE_CODE = "sRGB"
    SIZE = 1

    @property
    def rendering_intent(self) -> int:
        return self._u8(0)

    def is_valid(self) -> bool:
        return self.rendering_intent in RENDERING_INTENTS

    def summary(self) -> dict:
        return {
            "rendering_intent": self.rendering_intent,
            "rendering_intent_name": RENDERING_INTENTS.get(self.rendering_intent),
        }


def parse_sRGB(chunk):
    return sRGBView.from_chunk(chunk)
