# quizwheel/handlers/router.py
from fastapi import APIRouter

from quizwheel.handlers.results import router as results_router
from quizwheel.handlers.wheel import router as wheel_router

router = APIRouter()


@router.get("/health", include_in_schema=False)
async def health() -> dict[str, str]:
    return {"status": "ok"}


router.include_router(wheel_router)
router.include_router(results_router)
