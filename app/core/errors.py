import logging
from typing import Any, Optional

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.request_id import request_id_ctx


logger = logging.getLogger(__name__)


class AppError(Exception):
    """Error de dominio con su status HTTP asociado"""

    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConflictError(AppError):
    status_code = 400
    code = "CONFLICT"
    default_message = "User already exists"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "User not found"


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Please verify your email before logging in."


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Invalid credentials"


class InvalidTokenError(AppError):
    status_code = 400
    code = "INVALID_TOKEN"
    default_message = "Invalid or expired token."


class UnexpectedFailure(AppError):
    pass


def _get_request_id(request: Request) -> str:
    header_request_id = request.headers.get("X-Request-ID")
    if header_request_id:
        return header_request_id
    ctx_request_id = request_id_ctx.get()
    return ctx_request_id or ""


def _error_response(request: Request, status_code: int, message: Any, code: str, **extra) -> JSONResponse:
    content = {
        "message": message,
        "code": code,
        "request_id": _get_request_id(request),
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.code, exc.message)
    return _error_response(request, exc.status_code, exc.message, exc.code)


def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "message": exc.detail,
            "code": "HTTP_EXCEPTION",
            "request_id": _get_request_id(request),
        },
        headers=getattr(exc, "headers", None),
    )


def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.detail, "HTTP_EXCEPTION")


def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(
        request,
        422,
        "Invalid request",
        "VALIDATION_ERROR",
        detail=jsonable_encoder(exc.errors()),
    )


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        exc_info=exc,
        extra={"request_id": _get_request_id(request)},
    )
    return _error_response(request, 500, "Server error", "INTERNAL_ERROR")


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, starlette_http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
