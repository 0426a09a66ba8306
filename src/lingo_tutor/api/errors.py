"""Exception handlers mapping the error taxonomy onto JSON responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lingo_tutor.errors import LingoTutorError, ValidationError

logger = structlog.get_logger()


async def handle_app_error(request: Request, exc: LingoTutorError) -> JSONResponse:
    body: dict = {"error": exc.message}
    if isinstance(exc, ValidationError) and exc.details:
        body["details"] = exc.details
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            error=type(exc).__name__,
            cause=type(exc.__cause__).__name__ if exc.__cause__ else None,
        )
    return JSONResponse(body, status_code=exc.status_code)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = jsonable_encoder(exc.errors(), exclude={"input", "ctx", "url"})
    return JSONResponse({"error": "Invalid input data", "details": details}, status_code=400)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LingoTutorError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
