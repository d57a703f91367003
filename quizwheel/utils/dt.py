from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo


def start_of_day(d: date, tz: ZoneInfo | str = "UTC") -> datetime:
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    return datetime.combine(d, time.min, tzinfo=zone)


def next_day_start(d: date, tz: ZoneInfo | str = "UTC") -> datetime:
    return start_of_day(d + timedelta(days=1), tz)


@dataclass(frozen=True, slots=True)
class TimeProvider:
    timezone: str = "UTC"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def today(self) -> date:
        return datetime.now(tz=self.tz).date()
