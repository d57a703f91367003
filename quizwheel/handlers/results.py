from __future__ import annotations

import secrets

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from quizwheel.config import Settings
from quizwheel.handlers.deps import get_session, get_settings, rate_limit
from quizwheel.handlers.schemas import (
    BucketOut,
    PartyOut,
    RecentOut,
    ResultCreated,
    ResultExportRow,
    ResultIn,
    ResultStatsResponse,
)
from quizwheel.services.errors import Unauthorized
from quizwheel.services.results import ResultsService

router = APIRouter(tags=["results"], dependencies=[Depends(rate_limit)])


def require_export_token(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Open when EXPORT_TOKEN is unset; otherwise `Authorization: Bearer <token>`."""
    if not settings.export_token:
        return
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(token.strip(), settings.export_token):
        raise Unauthorized()


@router.post("/results", response_model=ResultCreated)
async def create_result(
    body: ResultIn,
    session: AsyncSession = Depends(get_session),
) -> ResultCreated:
    result_id = await ResultsService.record(
        session,
        score=body.score,
        party=body.party or None,
        associations=body.associations,
        program=body.program or None,
        housing=body.housing or None,
    )
    return ResultCreated(id=result_id)


@router.get("/stats", response_model=ResultStatsResponse)
async def result_stats(session: AsyncSession = Depends(get_session)) -> ResultStatsResponse:
    stats = await ResultsService.stats(session)
    return ResultStatsResponse(
        total=stats.total,
        average=stats.average,
        distribution=[BucketOut(bucket=b.bucket, count=b.count) for b in stats.distribution],
        parties=[PartyOut(party=p.party, count=p.count) for p in stats.parties],
        recent=[RecentOut(score=r.score, party=r.party, created_at=r.created_at) for r in stats.recent],
    )


@router.get(
    "/results/export",
    response_model=list[ResultExportRow],
    dependencies=[Depends(require_export_token)],
)
async def export_results(session: AsyncSession = Depends(get_session)) -> list[ResultExportRow]:
    rows = await ResultsService.export(session)
    return [ResultExportRow.model_validate(r) for r in rows]
