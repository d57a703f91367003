# quizwheel/handlers/wheel.py
from __future__ import annotations

import random

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quizwheel.config import Settings
from quizwheel.handlers.deps import get_clock, get_rng, get_session, get_settings, rate_limit
from quizwheel.handlers.schemas import (
    WheelCheckResponse,
    WheelRequest,
    WheelSpinResponse,
    WheelStatsResponse,
)
from quizwheel.services.errors import AlreadySpunToday
from quizwheel.services.results import ResultsService
from quizwheel.services.wheel import WheelService
from quizwheel.utils.dt import TimeProvider

router = APIRouter(prefix="/wheel", tags=["wheel"], dependencies=[Depends(rate_limit)])


@router.post("/check", response_model=WheelCheckResponse)
async def check_wheel(
    body: WheelRequest,
    session: AsyncSession = Depends(get_session),
    clock: TimeProvider = Depends(get_clock),
) -> WheelCheckResponse:
    res = await WheelService.check(
        session,
        identifier=body.user_identifier,
        today=clock.today(),
        tz=clock.tz,
    )
    return WheelCheckResponse(
        can_spin=res.can_spin,
        next_spin_date=res.next_eligible_at.isoformat() if res.next_eligible_at else None,
        total_spins=res.total_spins,
        total_wins=res.total_wins,
    )


@router.post("/spin", response_model=WheelSpinResponse)
async def spin_wheel(
    body: WheelRequest,
    session: AsyncSession = Depends(get_session),
    clock: TimeProvider = Depends(get_clock),
    rng: random.Random = Depends(get_rng),
    settings: Settings = Depends(get_settings),
) -> WheelSpinResponse:
    res = await WheelService.spin(
        session,
        identifier=body.user_identifier,
        today=clock.today(),
        rng=rng,
        odds=settings.wheel_win_odds,
        tz=clock.tz,
    )

    if res.already:
        raise AlreadySpunToday(
            canSpin=False,
            nextSpinDate=res.next_eligible_at.isoformat() if res.next_eligible_at else None,
        )

    return WheelSpinResponse(
        has_won=res.won,
        can_spin=False,
        total_spins=res.total_spins,
        total_wins=res.total_wins,
    )


@router.get("/stats", response_model=WheelStatsResponse)
async def wheel_stats(session: AsyncSession = Depends(get_session)) -> WheelStatsResponse:
    totals = await ResultsService.wheel_stats(session)
    return WheelStatsResponse(
        total_users=totals.total_users,
        total_spins=totals.total_spins,
        total_wins=totals.total_wins,
        win_rate=totals.win_rate,
    )
