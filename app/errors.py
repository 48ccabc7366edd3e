from fastapi import Request
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base error carrying a stable kind and the HTTP status it maps to."""

    kind = "AppError"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFound(AppError):
    kind = "NotFound"
    status_code = 404


class ScheduleConflict(AppError):
    kind = "ScheduleConflict"
    status_code = 409


class AlreadyRegistered(ScheduleConflict):
    kind = "AlreadyRegistered"


class Unauthorized(AppError):
    kind = "Unauthorized"
    status_code = 401


class Forbidden(AppError):
    kind = "Forbidden"
    status_code = 403


class InvalidInput(AppError):
    kind = "InvalidInput"
    status_code = 400


class PersistenceFailure(AppError):
    kind = "PersistenceFailure"
    status_code = 500


async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "message": exc.message},
        headers=headers,
    )
