from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import case, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quizwheel.database.models import QuizResult

RECENT_LIMIT = 10
EXPORT_LIMIT = 1000


@dataclass(frozen=True, slots=True)
class BucketRow:
    bucket: str
    count: int


@dataclass(frozen=True, slots=True)
class PartyRow:
    party: str
    count: int


@dataclass(frozen=True, slots=True)
class RecentRow:
    score: float
    party: str | None
    created_at: datetime


@dataclass(frozen=True, slots=True)
class ResultStats:
    total: int
    average: float
    distribution: list[BucketRow]
    parties: list[PartyRow]
    recent: list[RecentRow]


@dataclass(frozen=True, slots=True)
class ExportRow:
    id: int
    score: float
    party: str | None
    associations: list[str]
    program: str | None
    housing: str | None
    created_at: datetime


def _score_bucket():
    # upper bound exclusive, last bucket closed
    return case(
        (QuizResult.score < 20, "0-20"),
        (QuizResult.score < 40, "20-40"),
        (QuizResult.score < 60, "40-60"),
        (QuizResult.score < 80, "60-80"),
        else_="80-100",
    )


async def insert_result(
    session: AsyncSession,
    *,
    score: float,
    party: str | None,
    associations: list[str] | None,
    program: str | None,
    housing: str | None,
) -> int:
    row = QuizResult(
        score=float(score),
        party=party,
        associations=json.dumps(associations) if associations is not None else None,
        program=program,
        housing=housing,
    )
    session.add(row)
    await session.flush()  # ensures `row.id`
    return int(row.id)


async def get_result_stats(session: AsyncSession) -> ResultStats:
    res = await session.execute(select(func.count(QuizResult.id), func.avg(QuizResult.score)))
    total, average = res.one()

    bucket = _score_bucket().label("bucket")
    res = await session.execute(
        select(bucket, func.count(QuizResult.id))
        .group_by(bucket)
        .order_by(bucket)
    )
    distribution = [BucketRow(bucket=str(b), count=int(c)) for b, c in res.all()]

    count_col = func.count(QuizResult.id).label("count")
    res = await session.execute(
        select(QuizResult.party, count_col)
        .where(QuizResult.party.is_not(None))
        .group_by(QuizResult.party)
        .order_by(desc(count_col), QuizResult.party.asc())
    )
    parties = [PartyRow(party=str(p), count=int(c)) for p, c in res.all()]

    res = await session.execute(
        select(QuizResult.score, QuizResult.party, QuizResult.created_at)
        .order_by(desc(QuizResult.created_at), desc(QuizResult.id))
        .limit(RECENT_LIMIT)
    )
    recent = [RecentRow(score=float(s), party=p, created_at=ts) for s, p, ts in res.all()]

    return ResultStats(
        total=int(total or 0),
        average=float(average or 0.0),
        distribution=distribution,
        parties=parties,
        recent=recent,
    )


async def export_results(session: AsyncSession, limit: int = EXPORT_LIMIT) -> list[ExportRow]:
    res = await session.execute(
        select(QuizResult)
        .order_by(desc(QuizResult.created_at), desc(QuizResult.id))
        .limit(limit)
    )
    rows: list[ExportRow] = []
    for r in res.scalars().all():
        rows.append(
            ExportRow(
                id=int(r.id),
                score=float(r.score),
                party=r.party,
                associations=json.loads(r.associations) if r.associations else [],
                program=r.program,
                housing=r.housing,
                created_at=r.created_at,
            )
        )
    return rows
