import asyncio
import math
import random
from datetime import date, datetime, timezone

from quizwheel.database.repo.ledger_repo import get_entry
from quizwheel.services.wheel import WheelService, draw_outcome

from tests.helpers import FixedRng

D1 = date(2024, 5, 1)
D2 = date(2024, 5, 2)

WIN = FixedRng(0)
LOSS = FixedRng(7)


async def _spin(db, identifier: str, today: date, rng=LOSS):
    async with db.session() as s:
        return await WheelService.spin(s, identifier=identifier, today=today, rng=rng)


async def _check(db, identifier: str, today: date):
    async with db.session() as s:
        return await WheelService.check(s, identifier=identifier, today=today)


async def _entry(db, identifier: str):
    async with db.session() as s:
        return await get_entry(s, identifier)


async def test_daily_cycle_example(db):
    first = await _spin(db, "abc", D1)
    assert first.ok and not first.already
    assert (first.total_spins, first.total_wins) == (1, 0)
    entry = await _entry(db, "abc")
    assert (entry.last_spin_date, entry.total_spins, entry.total_wins) == (D1, 1, 0)

    second = await _spin(db, "abc", D1, rng=WIN)
    assert second.already and not second.ok
    assert second.won is False
    assert second.next_eligible_at == datetime(2024, 5, 2, tzinfo=timezone.utc)
    entry = await _entry(db, "abc")
    assert (entry.total_spins, entry.total_wins) == (1, 0)

    third = await _spin(db, "abc", D2, rng=WIN)
    assert third.ok and third.won
    assert (third.total_spins, third.total_wins) == (2, 1)


async def test_win_is_recorded(db):
    res = await _spin(db, "lucky", D1, rng=WIN)
    assert res.won is True
    entry = await _entry(db, "lucky")
    assert (entry.total_spins, entry.total_wins) == (1, 1)


async def test_check_for_unknown_identifier(db):
    res = await _check(db, "fresh", D1)
    assert res.can_spin is True
    assert res.next_eligible_at is None
    assert (res.total_spins, res.total_wins) == (0, 0)


async def test_check_never_mutates(db):
    await _spin(db, "abc", D1)
    before = await _entry(db, "abc")

    for _ in range(5):
        res = await _check(db, "abc", D1)
        assert res.can_spin is False
        assert res.next_eligible_at == datetime(2024, 5, 2, tzinfo=timezone.utc)

    assert await _entry(db, "abc") == before
    assert await _entry(db, "never-spun") is None

    res = await _check(db, "abc", D2)
    assert res.can_spin is True
    assert (res.total_spins, res.total_wins) == (1, 0)


async def test_wins_never_exceed_spins(db):
    rng = random.Random(1234)
    for offset in range(30):
        day = date.fromordinal(D1.toordinal() + offset)
        res = await _spin(db, "many", day, rng=FixedRng(rng.randrange(2)))
        assert res.total_wins <= res.total_spins
        res = await _spin(db, "many", day, rng=WIN)
        assert res.already
        assert res.total_wins <= res.total_spins

    entry = await _entry(db, "many")
    assert entry.total_spins == 30
    assert entry.total_wins <= entry.total_spins


async def test_concurrent_same_day_spins_commit_once(db):
    n = 10
    results = await asyncio.gather(*(_spin(db, "racer", D1, rng=WIN) for _ in range(n)))

    assert sum(1 for r in results if r.ok) == 1
    assert sum(1 for r in results if r.already) == n - 1

    entry = await _entry(db, "racer")
    assert (entry.total_spins, entry.total_wins) == (1, 1)


async def test_concurrent_distinct_identifiers_all_commit(db):
    ids = [f"user-{i}" for i in range(8)]
    results = await asyncio.gather(*(_spin(db, i, D1) for i in ids))
    assert all(r.ok for r in results)
    for i in ids:
        assert (await _entry(db, i)).total_spins == 1


def test_draw_outcome_win_rate_is_one_in_fifty():
    rng = random.SystemRandom()
    draws = 50_000
    p = 1 / WheelService.WIN_ODDS
    wins = sum(draw_outcome(rng, WheelService.WIN_ODDS) for _ in range(draws))

    expected = draws * p
    sigma = math.sqrt(draws * p * (1 - p))
    assert abs(wins - expected) <= 6 * sigma


def test_draw_outcome_only_zero_wins():
    assert draw_outcome(FixedRng(0), 50) is True
    assert draw_outcome(FixedRng(1), 50) is False
    assert draw_outcome(FixedRng(49), 50) is False
