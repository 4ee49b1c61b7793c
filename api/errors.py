"""
Exception handlers producing the uniform error envelope:
{"success": false, "error": <str>, "message": <str>}
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from core.exceptions import ReporterException
from schemas.api import ErrorResponse
import logging

logger = logging.getLogger(__name__)


# OpenAPI documentation for the statuses every router can return
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    404: {"model": ErrorResponse, "description": "Record or file not found"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump()
    )


def describe_validation_errors(exc: RequestValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        message = err.get("msg", "invalid value")
        problems.append(f"{location}: {message}" if location else message)
    return "; ".join(problems) or "invalid request"


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(ReporterException)
    async def reporter_exception_handler(request: Request, exc: ReporterException):
        request_id = getattr(request.state, "request_id", "-")
        if exc.status_code >= 500:
            logger.error(f"[{request_id}] {exc}")
        else:
            logger.warning(f"[{request_id}] {exc}")
        return error_response(exc.status_code, exc.message, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = describe_validation_errors(exc)
        logger.warning(f"[{getattr(request.state, 'request_id', '-')}] Rejected request: {message}")
        return error_response(status.HTTP_400_BAD_REQUEST, "Validation error", message)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"[{getattr(request.state, 'request_id', '-')}] Database error: {exc}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            "database error"
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[{getattr(request.state, 'request_id', '-')}] Unhandled error: {exc}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            str(exc) or type(exc).__name__
        )
