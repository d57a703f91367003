from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from quizwheel.config.settings import Settings
from quizwheel.utils.rate_limit import RateLimiter

log = logging.getLogger(__name__)


async def sweep_rate_limiter(rate_limiter: RateLimiter) -> None:
    dropped = rate_limiter.sweep()
    if dropped:
        log.debug("Rate limiter sweep: dropped %s idle clients, %s tracked", dropped, len(rate_limiter))


def build_scheduler(*, rate_limiter: RateLimiter, settings: Settings) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler(timezone=settings.timezone)

    scheduler.add_job(
        sweep_rate_limiter,
        IntervalTrigger(seconds=settings.rate_limit_window_seconds),
        kwargs={"rate_limiter": rate_limiter},
        id="rate_limiter_sweep",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    return scheduler
