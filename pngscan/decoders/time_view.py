# decoders/time_view.py

from pngscan.views import PayloadView


class tIMEView(PayloadView):
    TYPE_CODE = "tIME"
    # year(2) month day hour minute second
    SIZE = 7

    @property
    def year(self) -> int:
        return self._u16(0)

    @property
    def month(self) -> int:
        return self._u8(2)

    @property
    def day(self) -> int:
        return self._u8(3)

    @property
    def hour(self) -> int:
        return self._u8(4)

    @property
    def minute(self) -> int:
        return self._u8(5)

    @property
    def second(self) -> int:
        return self._u8(6)

    # Day is not checked against month length; second 60 allows a leap second
    def is_valid(self) -> bool:
        return (
            1 <= self.month <= 12
            and 1 <= self.day <= 31
            and self.hour <= 23
            and self.minute <= 59
            and self.second <= 60
        )

    def isoformat(self) -> str:
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}T"
            f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        )

    def summary(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "hour": self.hour,
            "minute": self.minute,
            "second": self.second,
            "timestamp": self.isoformat(),
        }


def parse_tIME(chunk):
    return tIMEView.from_chunk(chunk)
