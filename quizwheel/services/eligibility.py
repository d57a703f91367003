from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from quizwheel.database.repo.ledger_repo import LedgerEntry
from quizwheel.utils.dt import next_day_start


@dataclass(frozen=True, slots=True)
class Eligibility:
    eligible: bool
    next_eligible_at: datetime | None = None


def can_spin(entry: LedgerEntry | None, today: date, tz: ZoneInfo | str = "UTC") -> Eligibility:
    """
    Read-only daily gate.

    Eligible when there is no ledger entry or the last spin happened on an
    earlier day. Otherwise the next window opens at 00:00 of the day after
    `last_spin_date` in `tz` (not "now + 24h"), so the answer does not depend
    on when during the day the check arrives.

    A last_spin_date after `today` (clock moved back) also blocks, matching
    the date guard of the upsert.
    """
    if entry is None or entry.last_spin_date < today:
        return Eligibility(eligible=True)
    return Eligibility(eligible=False, next_eligible_at=next_day_start(entry.last_spin_date, tz))
