# app/api/errors.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("helphub.lookup")

GENERIC_SERVER_ERROR = "Server error"


class LookupServiceError(Exception):
    code = "LOOKUP_ERROR"
    status = 500

    def __init__(self, message: str, code: str | None = None, status: int | None = None):
        super().__init__(message)
        if code:
            self.code = code
        if status:
            self.status = status
        self.message = message


class RequestValidationFailed(LookupServiceError):
    code = "VALIDATION"
    status = 400


class ConfigurationError(LookupServiceError):
    code = "NOT_CONFIGURED"
    status = 500

    def __init__(self, message: str = "Server not configured"):
        super().__init__(message)


class NotFoundError(LookupServiceError):
    code = "NOT_FOUND"
    status = 404


class OrderNotFound(NotFoundError):
    code = "ORDER_NOT_FOUND"

    def __init__(self, message: str = "Order not found"):
        super().__init__(message)


class ItemsNotFound(NotFoundError):
    code = "ITEMS_NOT_FOUND"

    def __init__(self, message: str = "No products found on that order"):
        super().__init__(message)


class UpstreamError(LookupServiceError):
    """
    Any failure talking to the Admin API.

    `message` is safe to log: it never contains the token or the request URL.
    `upstream_status` is the HTTP status when there was one.
    """

    code = "UPSTREAM_ERROR"
    status = 500

    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status


def error_body(message: str) -> dict:
    return {"ok": False, "error": message}


def lookup_error_handler(_: Request, exc: LookupServiceError):
    return JSONResponse(status_code=exc.status, content=error_body(exc.message))


async def _validation_exc(_req: Request, exc: RequestValidationError):
    logger.info("invalid request body: %s", exc.errors())
    return JSONResponse(status_code=400, content=error_body("Invalid request body"))


async def _http_exc(_req: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_exc(_req: Request, exc: Exception):
    logger.exception("UNHANDLED_EXC: %s", exc)
    return JSONResponse(status_code=500, content=error_body(GENERIC_SERVER_ERROR))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LookupServiceError, lookup_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_exc)
    app.add_exception_handler(StarletteHTTPException, _http_exc)
    app.add_exception_handler(Exception, _unhandled_exc)
