from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from quizwheel.database.base import Base


class QuizResult(Base):
    __tablename__ = "quiz_results"
    __table_args__ = (
        CheckConstraint("score >= 0 AND score <= 100", name="ck_quiz_results_score_range"),
        Index("ix_quiz_results_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    score: Mapped[float] = mapped_column(Float)
    party: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    # JSON-encoded list of strings
    associations: Mapped[str | None] = mapped_column(Text, nullable=True)

    program: Mapped[str | None] = mapped_column(String(200), nullable=True)
    housing: Mapped[str | None] = mapped_column(String(200), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
