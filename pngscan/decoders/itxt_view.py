# decoders/itxt_view.py

from typing import Optional, Union

from pngscan.views import PayloadView

# Layout:
#   keyword            1-79 bytes
#   NUL                1 byte
#   compression flag   1 byte
#   compression method 1 byte
#   language tag       0+ bytes
#   NUL                1 byte
#   translated keyword 0+ bytes (UTF-8)
#   NUL                1 byte
#   text               0+ bytes (UTF-8 unless compressed)


class iTXtView(PayloadView):
    TYPE_CODE = "iTXt"

    def __init__(self, buffer, offset: int, length: int, keyword_end: int, lang_end: int, trans_end: int) -> None:
        super().__init__(buffer, offset, length)
        self._keyword_end = keyword_end
        self._lang_end = lang_end
        self._trans_end = trans_end

    @classmethod
    def from_chunk(cls, chunk):
        view = PayloadView(chunk.buffer, chunk.payload_offset, chunk.length)
        keyword_end = view._find_nul(0)
        # flag and method bytes must follow the keyword separator
        if keyword_end == -1 or keyword_end + 3 > chunk.length:
            return None
        lang_end = view._find_nul(keyword_end + 3)
        if lang_end == -1:
            return None
        trans_end = view._find_nul(lang_end + 1)
        if trans_end == -1:
            return None
        try:
            view._bytes(lang_end + 1, trans_end).decode("utf-8")
        except UnicodeDecodeError:
            return None
        return cls(chunk.buffer, chunk.payload_offset, chunk.length, keyword_end, lang_end, trans_end)

    @property
    def keyword(self) -> str:
        return self._bytes(0, self._keyword_end).decode("latin-1")

    @property
    def compression_flag(self) -> int:
        return self._u8(self._keyword_end + 1)

    @property
    def compression_method(self) -> int:
        return self._u8(self._keyword_end + 2)

    @property
    def language(self) -> str:
        return self._bytes(self._keyword_end + 3, self._lang_end).decode("latin-1")

    @property
    def translated_keyword(self) -> str:
        return self._bytes(self._lang_end + 1, self._trans_end).decode("utf-8")

    def raw_text(self) -> bytes:
        return self._bytes(self._trans_end + 1)

    # Plain text only when uncompressed; undecodable text stays as bytes
    @property
    def text(self) -> Optional[Union[str, bytes]]:
        if self.compression_flag != 0:
            return None
        raw = self.raw_text()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return raw

    def is_valid(self) -> bool:
        return self.compression_flag in (0, 1)

    def summary(self) -> dict:
        return {
            "keyword": self.keyword,
            "compression_flag": self.compression_flag,
            "compression_method": self.compression_method,
            "language": self.language,
            "translated_keyword": self.translated_keyword,
            "text": self.text,
            "text_length": len(self) - (self._trans_end + 1),
        }


def parse_iTXt(chunk):
    return iTXtView.from_chunk(chunk)
