from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from quizwheel.database.repo.ledger_repo import WheelTotals, wheel_totals
from quizwheel.database.repo.results_repo import (
    ExportRow,
    ResultStats,
    export_results,
    get_result_stats,
    insert_result,
)
from quizwheel.database.tx import transactional

log = logging.getLogger(__name__)


class ResultsService:
    @staticmethod
    async def record(
        session: AsyncSession,
        *,
        score: float,
        party: str | None = None,
        associations: list[str] | None = None,
        program: str | None = None,
        housing: str | None = None,
    ) -> int:
        async with transactional(session):
            result_id = await insert_result(
                session,
                score=score,
                party=party,
                associations=associations,
                program=program,
                housing=housing,
            )
        log.debug("Stored quiz result id=%s score=%s", result_id, score)
        return result_id

    @staticmethod
    async def stats(session: AsyncSession) -> ResultStats:
        return await get_result_stats(session)

    @staticmethod
    async def export(session: AsyncSession) -> list[ExportRow]:
        return await export_results(session)

    @staticmethod
    async def wheel_stats(session: AsyncSession) -> WheelTotals:
        return await wheel_totals(session)
