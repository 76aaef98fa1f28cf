"""Error taxonomy shared by every service, and the FastAPI handlers that map it."""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.logger import logger


class AppError(Exception):
    """Base class for errors that carry their own HTTP status"""

    def __init__(self, message: str, status_code: int = 400, extra: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.extra = extra or {}
        super().__init__(message)


class ValidationError(AppError):
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class NotFoundError(AppError):
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictError(AppError):
    def __init__(self, message: str, unavailable_seats: Optional[List[int]] = None):
        extra = {"unavailableSeats": unavailable_seats} if unavailable_seats is not None else None
        super().__init__(message, status.HTTP_409_CONFLICT, extra)
        self.unavailable_seats = unavailable_seats or []


class AuthenticationError(AppError):
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class AuthorizationError(AppError):
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class InternalError(AppError):
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.opt(exception=exc).error(f'{request.method} {request.url.path}: {exc.message}')
    else:
        logger.warning(f'{request.method} {request.url.path}: {exc.message}')

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {'WWW-Authenticate': 'Bearer'}

    return JSONResponse(
        status_code=exc.status_code,
        content={'detail': exc.message, **exc.extra},
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f'{request.method} {request.url.path}: invalid request {exc.errors()}')
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': 'Invalid request data', 'errors': jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    # ctx may hold exception instances which are not JSON serializable
    return [
        {'loc': list(err.get('loc', ())), 'msg': err.get('msg', ''), 'type': err.get('type', '')}
        for err in exc.errors()
    ]


EXCEPTION_HANDLERS = {
    AppError: app_error_handler,
    RequestValidationError: validation_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
