from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base for errors that map to a JSON error response."""

    status_code: int = 500
    message: str = "Server error"

    def __init__(self, message: str | None = None, **extra: Any) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.extra = extra

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


class InvalidPayload(AppError):
    status_code = 400
    message = "Invalid request body"


class MissingIdentifier(InvalidPayload):
    message = "Missing user identifier"


class AlreadySpunToday(AppError):
    status_code = 409
    message = "Already played today"


class Unauthorized(AppError):
    status_code = 401
    message = "Unauthorized"


class RateLimited(AppError):
    status_code = 429
    message = "Too many requests. Please wait."


class StorageUnavailable(AppError):
    status_code = 503
    message = "Storage unavailable, please retry"
