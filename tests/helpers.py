from __future__ import annotations

from datetime import date
from zoneinfo import ZoneInfo


class FixedRng:
    """randrange always returns `value` (0 = win, anything else = loss)."""

    def __init__(self, value: int) -> None:
        self.value = value

    def randrange(self, *_args, **_kwargs) -> int:
        return self.value


class FrozenClock:
    def __init__(self, day: date, timezone: str = "UTC") -> None:
        self.day = day
        self.timezone = timezone

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def today(self) -> date:
        return self.day
