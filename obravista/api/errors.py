"""Map domain exceptions onto HTTP responses carrying the failure envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from obravista.api.v1._authz import map_auth_error
from obravista.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ObraVistaException,
    ValidationError,
)
from obravista.domain.state_machine import InvalidTransitionError
from obravista.schemas.common import fail

logger = logging.getLogger(__name__)


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=fail(message))


def _status_for(exc: Exception) -> int:
    if isinstance(exc, (AuthenticationError, AuthorizationError)):
        return map_auth_error(exc)[0]
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ObraVistaException)
    async def handle_domain_error(request: Request, exc: ObraVistaException) -> JSONResponse:
        code = _status_for(exc)
        logger.info(
            "api.request_failed",
            extra={"event": "api.request_failed", "path": request.url.path, "status": code},
        )
        return _failure(code, str(exc))

    @app.exception_handler(InvalidTransitionError)
    async def handle_transition_error(request: Request, exc: InvalidTransitionError) -> JSONResponse:
        logger.info(
            "api.transition_rejected",
            extra={"event": "api.transition_rejected", "path": request.url.path},
        )
        return _failure(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning(
            "api.integrity_conflict",
            extra={"event": "api.integrity_conflict", "path": request.url.path},
        )
        return _failure(status.HTTP_409_CONFLICT, "The record conflicts with existing data.")

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else "Invalid request."
        return _failure(422, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _failure(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "api.unhandled_error",
            extra={"event": "api.unhandled_error", "path": request.url.path},
        )
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error.")
