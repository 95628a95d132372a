"""
Exception handlers for the HTTP API

Every error leaves the API as an ErrorResponse body tagged with a request id,
which is also written to the API log line so the two can be matched.
"""

import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.schemas.error import ErrorResponse, ErrorDetail, ValidationErrorResponse
from models.errors import RelayError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


def _json(status_code: int, body: BaseModel) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the relay's exception handlers to the app."""

    @app.exception_handler(RequestValidationError)
    async def on_validation_error(request: Request, exc: RequestValidationError):
        request_id = str(uuid.uuid4())
        errors = exc.errors()
        log.warn(f"Validation error ({request_id}): {len(errors)} errors", path=request.url.path)

        body = ValidationErrorResponse(
            error=ErrorDetail(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"error_count": len(errors)},
            ),
            validation_errors=[
                {
                    "field": ".".join(str(part) for part in error["loc"][1:]),
                    "message": error["msg"],
                    "type": error["type"],
                }
                for error in errors
            ],
            request_id=request_id,
        )
        return _json(status.HTTP_422_UNPROCESSABLE_ENTITY, body)

    @app.exception_handler(RelayError)
    async def on_relay_error(request: Request, exc: RelayError):
        request_id = str(uuid.uuid4())
        log.warn(f"{exc.code} ({request_id}): {exc.message}", path=request.url.path)

        body = ErrorResponse(
            error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details),
            request_id=request_id,
        )
        return _json(exc.status_code, body)

    @app.exception_handler(Exception)
    async def on_unexpected_error(request: Request, exc: Exception):
        request_id = str(uuid.uuid4())
        log.error(f"Unhandled {type(exc).__name__} ({request_id}): {exc}", path=request.url.path)

        body = ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred",
                details={"request_id": request_id},
            ),
            request_id=request_id,
        )
        return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, body)
