# quizwheel/database/models/spin.py
from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from quizwheel.database.base import Base

IDENTIFIER_MAX_LENGTH = 128


class SpinLedger(Base):
    """
    One row per client identifier (unique).
    last_spin_date is the calendar day of the latest committed spin in the
    configured reference timezone; a second spin on that day is refused by
    the conditional upsert in ledger_repo.
    """
    __tablename__ = "spin_ledger"
    __table_args__ = (
        UniqueConstraint("user_identifier", name="uq_spin_ledger_identifier"),
        CheckConstraint("total_spins >= 0", name="ck_spin_ledger_spins_nonneg"),
        CheckConstraint("total_wins >= 0 AND total_wins <= total_spins", name="ck_spin_ledger_wins_le_spins"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_identifier: Mapped[str] = mapped_column(String(IDENTIFIER_MAX_LENGTH))
    last_spin_date: Mapped[date] = mapped_column(Date, index=True)

    total_spins: Mapped[int] = mapped_column(Integer, default=1)
    total_wins: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )
