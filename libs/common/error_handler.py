"""Global exception handlers producing one error envelope.

Every error response has the shape::

    {"timestamp": ..., "status": 404, "error": "Not Found",
     "message": "...", "path": "/api/..."}
"""

from datetime import datetime
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from libs.common.datetime_utils import utc_now
from libs.common.exceptions import AppError
from libs.common.logging import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class ErrorResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str


def error_response(
    request: Request,
    status_code: int,
    message: str,
    error: Optional[str] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        timestamp=utc_now(),
        status=int(status_code),
        error=error or HTTPStatus(status_code).phrase,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    log("%s: %s", type(exc).__name__, exc.message)
    return error_response(request, exc.status_code, exc.message, error=exc.title)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    detail = "; ".join(
        f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning("Request validation failed: %s", detail)
    return error_response(
        request,
        HTTPStatus.BAD_REQUEST,
        detail or "Request validation failed",
        error="Validation Failed",
    )


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(request, exc.status_code, message, headers=exc.headers)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        request, HTTPStatus.INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register the envelope handlers on ``app``."""
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
