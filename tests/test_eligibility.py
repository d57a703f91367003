from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from quizwheel.database.repo.ledger_repo import LedgerEntry
from quizwheel.services.eligibility import can_spin


def _entry(last: date, spins: int = 1, wins: int = 0) -> LedgerEntry:
    return LedgerEntry(identifier="abc", last_spin_date=last, total_spins=spins, total_wins=wins)


def test_no_entry_is_eligible():
    res = can_spin(None, date(2024, 5, 1))
    assert res.eligible is True
    assert res.next_eligible_at is None


def test_entry_from_previous_day_is_eligible():
    res = can_spin(_entry(date(2024, 4, 30)), date(2024, 5, 1))
    assert res.eligible is True
    assert res.next_eligible_at is None


def test_same_day_blocks_until_next_midnight():
    res = can_spin(_entry(date(2024, 5, 1)), date(2024, 5, 1))
    assert res.eligible is False
    assert res.next_eligible_at == datetime(2024, 5, 2, tzinfo=timezone.utc)
    assert res.next_eligible_at.isoformat() == "2024-05-02T00:00:00+00:00"


def test_next_window_uses_reference_timezone():
    res = can_spin(_entry(date(2024, 12, 31)), date(2024, 12, 31), tz="Europe/Paris")
    assert res.eligible is False
    assert res.next_eligible_at == datetime(2025, 1, 1, tzinfo=ZoneInfo("Europe/Paris"))
    assert res.next_eligible_at.isoformat() == "2025-01-01T00:00:00+01:00"


def test_future_last_spin_date_blocks():
    # clock moved backwards after a commit
    res = can_spin(_entry(date(2024, 5, 3)), date(2024, 5, 2))
    assert res.eligible is False
    assert res.next_eligible_at == datetime(2024, 5, 4, tzinfo=timezone.utc)
