"""Maps the stockroom error taxonomy onto HTTP responses.

protean's own handlers are registered first. Validation and lookup
failures raised by protean itself are then answered in the stockroom
error shape (`error`, `message`, `details`).
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean import exceptions as protean_exceptions
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from stockroom.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDenied,
    StockroomError,
    UpstreamUnavailable,
    ValidationError,
)

logger = structlog.get_logger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (PermissionDenied, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (UpstreamUnavailable, 503),
)


def status_for(exc: StockroomError) -> int:
    for error_cls, status_code in _STATUS_CODES:
        if isinstance(exc, error_cls):
            return status_code
    return 500


def _respond(request: Request, exc: StockroomError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.warning if status_code >= 500 else logger.info
    log("request_failed", path=request.url.path, status=status_code, error=exc.code, message=exc.message)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def stockroom_error_handler(request: Request, exc: StockroomError) -> JSONResponse:
    return _respond(request, exc)


async def protean_validation_handler(request: Request, exc: protean_exceptions.ValidationError) -> JSONResponse:
    return _respond(request, ValidationError.from_protean(exc))


async def protean_not_found_handler(request: Request, exc: protean_exceptions.ObjectNotFoundError) -> JSONResponse:
    return _respond(request, NotFoundError(str(exc) or "Not found"))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        messages.setdefault(".".join(location) or "body", []).append(error.get("msg", "Invalid value"))
    return JSONResponse(status_code=400, content=ValidationError(messages).to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    register_protean_handlers(app)
    app.add_exception_handler(StockroomError, stockroom_error_handler)
    app.add_exception_handler(protean_exceptions.ValidationError, protean_validation_handler)
    app.add_exception_handler(protean_exceptions.ObjectNotFoundError, protean_not_found_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
