from __future__ import annotations

import logging
import random
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from quizwheel.config import Settings
from quizwheel.database import Database
from quizwheel.services.errors import RateLimited
from quizwheel.utils.dt import TimeProvider
from quizwheel.utils.middleware import client_ip
from quizwheel.utils.rate_limit import RateLimiter

log = logging.getLogger(__name__)


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """
    One DB session per request. Services commit their own writes;
    anything left uncommitted is rolled back when the session closes.
    """
    db: Database = request.app.state.db
    async with db.session() as session:
        yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_clock(request: Request) -> TimeProvider:
    return request.app.state.clock


def get_rng(request: Request) -> random.Random:
    return request.app.state.rng


async def rate_limit(request: Request) -> None:
    limiter: RateLimiter = request.app.state.rate_limiter
    settings: Settings = request.app.state.settings
    ip = client_ip(request, trust_proxy=settings.trust_proxy)
    if not limiter.hit(ip):
        log.info("Rate limit hit for %s on %s", ip, request.url.path)
        raise RateLimited(retryAfter=round(limiter.retry_after(ip), 1))
