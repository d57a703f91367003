# quizwheel/services/wheel.py
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from quizwheel.database.repo.ledger_repo import get_entry, upsert_spin
from quizwheel.database.tx import transactional
from quizwheel.services.eligibility import can_spin

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CheckResult:
    can_spin: bool
    next_eligible_at: datetime | None
    total_spins: int
    total_wins: int


@dataclass(frozen=True, slots=True)
class SpinResult:
    ok: bool
    already: bool
    won: bool = False
    total_spins: int = 0
    total_wins: int = 0
    next_eligible_at: datetime | None = None


def draw_outcome(rng: random.Random, odds: int) -> bool:
    """One independent draw, uniform over [0, odds); wins on 0."""
    return rng.randrange(odds) == 0


class WheelService:
    # 1 in 50
    WIN_ODDS = 50

    @staticmethod
    async def check(
        session: AsyncSession,
        *,
        identifier: str,
        today: date,
        tz: ZoneInfo | str = "UTC",
    ) -> CheckResult:
        entry = await get_entry(session, identifier)
        decision = can_spin(entry, today, tz)
        return CheckResult(
            can_spin=decision.eligible,
            next_eligible_at=decision.next_eligible_at,
            total_spins=entry.total_spins if entry else 0,
            total_wins=entry.total_wins if entry else 0,
        )

    @staticmethod
    async def spin(
        session: AsyncSession,
        *,
        identifier: str,
        today: date,
        rng: random.Random,
        odds: int = WIN_ODDS,
        tz: ZoneInfo | str = "UTC",
    ) -> SpinResult:
        # 1) Roll first; discarded if the guard refuses the commit
        won = draw_outcome(rng, odds)

        # 2) Eligibility re-check and commit in one conditional upsert
        async with transactional(session):
            entry = await upsert_spin(session, identifier=identifier, today=today, won=won)

        if entry is not None:
            if won:
                log.info("Wheel win for identifier=%r on %s", identifier, today.isoformat())
            return SpinResult(
                ok=True,
                already=False,
                won=won,
                total_spins=entry.total_spins,
                total_wins=entry.total_wins,
            )

        # 3) Guard refused: already spun today, nothing was written
        current = await get_entry(session, identifier)
        decision = can_spin(current, today, tz)
        log.info("Spin rejected for identifier=%r: already played on %s", identifier, today.isoformat())
        return SpinResult(
            ok=False,
            already=True,
            total_spins=current.total_spins if current else 0,
            total_wins=current.total_wins if current else 0,
            next_eligible_at=decision.next_eligible_at,
        )
