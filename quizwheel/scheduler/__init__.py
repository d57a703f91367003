# quizwheel/scheduler/__init__.py
from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from quizwheel.config.settings import Settings
from quizwheel.scheduler.jobs import build_scheduler
from quizwheel.utils.rate_limit import RateLimiter


def setup_scheduler(rate_limiter: RateLimiter, settings: Settings) -> AsyncIOScheduler:
    scheduler = build_scheduler(rate_limiter=rate_limiter, settings=settings)
    scheduler.start()
    return scheduler
