from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from quizwheel.database.models import SpinLedger


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    identifier: str
    last_spin_date: date
    total_spins: int
    total_wins: int


@dataclass(frozen=True, slots=True)
class WheelTotals:
    total_users: int
    total_spins: int
    total_wins: int

    @property
    def win_rate(self) -> float:
        if self.total_spins <= 0:
            return 0.0
        return self.total_wins / self.total_spins * 100.0


def _insert_for(session: AsyncSession):
    # both dialects render INSERT .. ON CONFLICT .. DO UPDATE .. WHERE .. RETURNING
    if session.bind is not None and session.bind.dialect.name == "postgresql":
        return pg_insert
    return sqlite_insert


def _to_entry(row) -> LedgerEntry:
    return LedgerEntry(
        identifier=str(row.user_identifier),
        last_spin_date=row.last_spin_date,
        total_spins=int(row.total_spins or 0),
        total_wins=int(row.total_wins or 0),
    )


async def get_entry(session: AsyncSession, identifier: str) -> LedgerEntry | None:
    res = await session.execute(
        select(
            SpinLedger.user_identifier,
            SpinLedger.last_spin_date,
            SpinLedger.total_spins,
            SpinLedger.total_wins,
        ).where(SpinLedger.user_identifier == identifier)
    )
    row = res.first()
    return _to_entry(row) if row else None


async def upsert_spin(
    session: AsyncSession,
    *,
    identifier: str,
    today: date,
    won: bool,
) -> LedgerEntry | None:
    """
    Create-or-increment the ledger row in ONE statement.

    The DO UPDATE only fires while the stored day is strictly before `today`,
    so of two racing requests for the same identifier and day exactly one gets
    a row back. Returns None when the guard refused the write (nothing changed).

    Caller owns the transaction.
    """
    win = 1 if won else 0
    insert = _insert_for(session)

    stmt = insert(SpinLedger).values(
        user_identifier=identifier,
        last_spin_date=today,
        total_spins=1,
        total_wins=win,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_identifier"],
        set_={
            "last_spin_date": stmt.excluded.last_spin_date,
            "total_spins": SpinLedger.total_spins + 1,
            "total_wins": SpinLedger.total_wins + stmt.excluded.total_wins,
            "updated_at": func.now(),
        },
        where=SpinLedger.last_spin_date < stmt.excluded.last_spin_date,
    ).returning(
        SpinLedger.user_identifier,
        SpinLedger.last_spin_date,
        SpinLedger.total_spins,
        SpinLedger.total_wins,
    )

    res = await session.execute(stmt)
    row = res.first()
    return _to_entry(row) if row else None


async def wheel_totals(session: AsyncSession) -> WheelTotals:
    res = await session.execute(
        select(
            func.count(SpinLedger.id),
            func.coalesce(func.sum(SpinLedger.total_spins), 0),
            func.coalesce(func.sum(SpinLedger.total_wins), 0),
        )
    )
    users, spins, wins = res.one()
    return WheelTotals(
        total_users=int(users or 0),
        total_spins=int(spins or 0),
        total_wins=int(wins or 0),
    )
