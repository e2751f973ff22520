"""
FastAPI middleware and exception handlers.

- Request context: every request gets an id (taken from ``X-Request-ID`` when
  the caller sends one) that is bound into the structlog context, so all
  events logged while serving it carry the same ``request_id``.
- Errors: engine exceptions, HTTPException and request validation failures
  are all rendered as ``{"success": false, "error": <code>, "detail": <message>}``,
  the same shape as the 500 fallback.
"""

import time
import uuid
from typing import Callable, Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..exceptions import CleaningError, InvalidPatternError, ShareTokenError, TextifyError
from ..revision.session import CLEAN_FAILED_DESCRIPTION

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


_HTTP_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "invalid_request",
}


def _error_response(
    status_code: int,
    error: str,
    detail: str,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "detail": detail},
        headers=headers,
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    """One "location: message" entry per failed field, body prefix dropped."""
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        message = error.get("msg", "Invalid value")
        messages.append(f"{'.'.join(location)}: {message}" if location else message)
    return "; ".join(messages)


def setup_request_context_middleware(app: FastAPI) -> None:
    """
    Bind a request id and log each request with its processing time.

    Request bodies are never logged: they carry the user's text.
    """

    @app.middleware("http")
    async def request_context(request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start_time = time.time()

        try:
            response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(
                "request_completed",
                status_code=response.status_code,
                process_time_ms=round(process_time * 1000, 2),
            )

            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers["X-Process-Time"] = str(process_time)
            return response

        finally:
            structlog.contextvars.clear_contextvars()


def setup_error_handlers(app: FastAPI) -> None:
    """
    Register engine exception handlers and the catch-all for unexpected errors.
    """

    @app.exception_handler(CleaningError)
    async def cleaning_error_handler(request: Request, exc: CleaningError) -> JSONResponse:
        logger.error("cleaning_failed", error=str(exc))
        return _error_response(status.HTTP_502_BAD_GATEWAY, "cleaning_failed", CLEAN_FAILED_DESCRIPTION)

    @app.exception_handler(InvalidPatternError)
    async def pattern_error_handler(request: Request, exc: InvalidPatternError) -> JSONResponse:
        logger.info("invalid_pattern", reason=exc.reason)
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_pattern", exc.reason)

    @app.exception_handler(ShareTokenError)
    async def share_token_error_handler(request: Request, exc: ShareTokenError) -> JSONResponse:
        logger.info("invalid_share_token", error=str(exc))
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_share_token", str(exc))

    @app.exception_handler(TextifyError)
    async def engine_error_handler(request: Request, exc: TextifyError) -> JSONResponse:
        logger.error("engine_error", error=str(exc), error_type=type(exc).__name__)
        return _error_response(status.HTTP_400_BAD_REQUEST, "engine_error", str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.info("http_error", status_code=exc.status_code, detail=exc.detail)
        return _error_response(
            exc.status_code,
            _HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        detail = _format_validation_errors(exc)
        logger.info("request_validation_failed", detail=detail)
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_request", detail)

    @app.middleware("http")
    async def handle_unexpected_errors(request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                "unhandled_exception",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return _error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "internal_error",
                str(e) if app.debug else "An unexpected error occurred",
            )
