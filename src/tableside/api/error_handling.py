from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tableside.api.middleware.request_id import get_request_id
from tableside.application.errors import (
    ApiError,
    NotFoundError,
    OrderTransitionConflictError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# starlette picks the handler registered for the nearest class in the exception MRO
API_ERROR_CODES: tuple[tuple[type[ApiError], int, str], ...] = (
    (ValidationError, 400, "VALIDATION_ERROR"),
    (NotFoundError, 404, "NOT_FOUND"),
    (OrderTransitionConflictError, 409, "INVALID_ORDER_TRANSITION"),
    (StoreError, 503, "STORE_UNAVAILABLE"),
    (ApiError, 500, "API_ERROR"),
)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def error_body(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        },
        "requestId": get_request_id(),
    }


def _api_error_handler(status_code: int, code: str):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        api_error = cast(ApiError, exc)
        if status_code >= 500:
            logger.warning(
                "api_error",
                extra={"path": request.url.path, "status_code": status_code},
            )
        return JSONResponse(
            status_code=status_code,
            content=error_body(code, api_error.message, api_error.details),
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    return JSONResponse(
        status_code=http_exc.status_code,
        content=error_body(
            HTTP_ERROR_CODES.get(http_exc.status_code, "HTTP_ERROR"),
            str(http_exc.detail) if http_exc.detail else "request failed",
        ),
        headers=getattr(http_exc, "headers", None),
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return JSONResponse(
        status_code=400,
        content=error_body(
            "INVALID_REQUEST",
            "request validation failed",
            {"errors": jsonable_encoder(validation_exc.errors())},
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    for exc_cls, status_code, code in API_ERROR_CODES:
        app.add_exception_handler(exc_cls, _api_error_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
