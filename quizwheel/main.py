# quizwheel/main.py
from __future__ import annotations

import logging
import random
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quizwheel.config import Settings
from quizwheel.database import Database
from quizwheel.handlers.errors import register_error_handlers
from quizwheel.handlers.router import router as handlers_router
from quizwheel.scheduler import setup_scheduler
from quizwheel.utils.dt import TimeProvider
from quizwheel.utils.middleware import BodySizeLimitMiddleware, SecurityHeadersMiddleware
from quizwheel.utils.rate_limit import RateLimiter


def setup_logging(is_dev: bool) -> None:
    """
    Clean production logging:
    - app logs: INFO (or DEBUG in dev)
    - SQLAlchemy / driver / scheduler logs: WARNING+
    """
    app_level = logging.DEBUG if is_dev else logging.INFO

    logging.basicConfig(
        level=app_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    for name in (
        "sqlalchemy",
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "sqlalchemy.orm",
        "aiosqlite",
        "asyncpg",
        "apscheduler",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app(
    settings: Settings,
    *,
    db: Database | None = None,
    rng: random.Random | None = None,
    clock: TimeProvider | None = None,
    rate_limiter: RateLimiter | None = None,
) -> FastAPI:
    log = logging.getLogger("quizwheel")

    db = db or Database(settings.database_url)
    rate_limiter = rate_limiter or RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await db.init_models()
        log.info("DB initialized (%s)", db.dialect_name)

        scheduler = setup_scheduler(rate_limiter, settings)
        log.info("Scheduler started")

        try:
            yield
        finally:
            try:
                scheduler.shutdown(wait=False)
            except Exception:
                log.exception("Failed to shutdown scheduler")

            try:
                await db.close()
            except Exception:
                log.exception("Failed to close DB")
            log.info("Stopped")

    app = FastAPI(title="quizwheel", lifespan=lifespan)

    app.state.settings = settings
    app.state.db = db
    app.state.rng = rng or random.SystemRandom()
    app.state.clock = clock or TimeProvider(settings.timezone)
    app.state.rate_limiter = rate_limiter

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(BodySizeLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_error_handlers(app)
    app.include_router(handlers_router)
    return app


def main() -> None:
    settings = Settings.load()
    setup_logging(settings.is_dev)
    log = logging.getLogger("quizwheel")

    app = create_app(settings)
    log.info("Serving on %s:%s", settings.host, settings.port)

    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    except KeyboardInterrupt:
        pass
    except Exception:
        log.exception("Server crashed")
        raise


if __name__ == "__main__":
    main()
