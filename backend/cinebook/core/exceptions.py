"""
Domain exceptions and their HTTP mapping.

Services raise these instead of HTTPException so the same code paths can be
exercised without a request in flight. The handlers registered by
`register_exception_handlers` turn them into `{"detail": ...}` responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cinebook.core.logging import get_logger

logger = get_logger(__name__)


class CinebookError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(CinebookError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(CinebookError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(CinebookError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(CinebookError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(CinebookError):
    status_code = status.HTTP_409_CONFLICT


class SeatAlreadyBooked(Conflict):
    def __init__(self, movie_id: int, seat_label: str):
        self.movie_id = movie_id
        self.seat_label = seat_label
        super().__init__("Seat already booked")


class UniqueConstraintViolation(Exception):
    """Raised by the ledger when a seat key is already taken. Never reaches HTTP."""

    def __init__(self, constraint: str):
        self.constraint = constraint
        super().__init__(f"unique constraint violated: {constraint}")


async def cinebook_error_handler(request: Request, exc: CinebookError) -> JSONResponse:
    logger.warning(
        "request_rejected",
        error=type(exc).__name__,
        detail=exc.message,
        status_code=exc.status_code,
    )
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.warning("request_validation_failed", errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body", "errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", error=str(exc), exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CinebookError, cinebook_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
