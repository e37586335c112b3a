"""Global exception handlers for the agenda API.

Request validation errors become 400 responses with field-level details;
anything unhandled becomes a generic 500 that never leaks internals.
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..domain.agenda.types import INVALID_REQUEST_CODE
from ..infra.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_CODE = "GOMUN-INTERNAL"


def register_error_handlers(app: FastAPI) -> None:
    """Register the validation and catch-all handlers on the app."""

    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_validation_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = _collect_field_errors(exc.errors())
        logger.warning(
            "request_validation_failed",
            extra={"path": request.url.path, "fields": ",".join(fields)},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": {
                    "error_code": INVALID_REQUEST_CODE,
                    "message": "Request body is invalid.",
                    "details": fields,
                }
            },
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            extra={"path": request.url.path, "method": request.method},
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": {
                    "error_code": INTERNAL_ERROR_CODE,
                    "message": "An unexpected error occurred.",
                    "details": {},
                }
            },
        )


def _collect_field_errors(errors: List[Dict[str, Any]]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        key = ".".join(location) or "body"
        fields.setdefault(key, str(error.get("msg", "invalid value")))
    return fields
