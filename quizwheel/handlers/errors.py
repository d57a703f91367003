from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from quizwheel.services.errors import AppError, InvalidPayload, MissingIdentifier, StorageUnavailable

log = logging.getLogger(__name__)

WHEEL_PREFIX = "/wheel"


def _error_response(err: AppError) -> JSONResponse:
    headers = None
    retry_after = err.extra.get("retryAfter")
    if retry_after is not None:
        headers = {"Retry-After": str(max(1, int(round(retry_after))))}
    return JSONResponse(err.to_payload(), status_code=err.status_code, headers=headers)


def _is_identifier_error(request: Request, exc: RequestValidationError) -> bool:
    if not request.url.path.startswith(WHEEL_PREFIX):
        return False
    for err in exc.errors():
        loc = tuple(err.get("loc") or ())
        if "userIdentifier" in loc or "user_identifier" in loc:
            return True
        # no body, a non-object body, or malformed JSON at ("body", pos)
        if loc[:1] == ("body",) and len(loc) <= 2:
            return True
    return False


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if _is_identifier_error(request, exc):
        return _error_response(MissingIdentifier())

    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return _error_response(InvalidPayload(details=details))


async def storage_error_handler(request: Request, exc: DBAPIError | PoolTimeoutError) -> JSONResponse:
    log.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(StorageUnavailable())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(DBAPIError, storage_error_handler)
    app.add_exception_handler(PoolTimeoutError, storage_error_handler)
