"""API error taxonomy.

Every failure a handler reports on purpose is an :class:`ApiError`, which
FastAPI renders as ``{"detail": {"code": ..., "message": ...}}``. Validation
failures add an ``errors`` list of ``{"field", "message"}`` pairs so a client
can show every problem at once.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taskhub.config import settings

logger = logging.getLogger(__name__)

class ApiError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"
    message = "bad request"

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        extra: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.code = code or self.code
        self.message = message or self.message
        detail: dict[str, Any] = {"code": self.code, "message": self.message}
        if extra:
            detail.update(extra)
        super().__init__(status_code=type(self).status_code, detail=detail, headers=headers)

class BadRequest(ApiError):
    pass

class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    message = "authentication required"

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        super().__init__(message, code, headers={"WWW-Authenticate": "Bearer"})

class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    message = "forbidden"

class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "not found"

class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    message = "conflict"

class RateLimited(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"
    message = "too many requests"

class ValidationFailed(ApiError):
    code = "VALIDATION_ERROR"
    message = "invalid request data"

    def __init__(self, errors: list[dict[str, str]], message: str | None = None) -> None:
        self.errors = errors
        super().__init__(message, extra={"errors": errors})

def _field_path(loc: tuple[Any, ...]) -> str:
    # ("body", "contributors", 0) -> "contributors[0]"
    parts = [p for p in loc if p not in ("body", "query", "path")]
    out = ""
    for p in parts:
        if isinstance(p, int):
            out += f"[{p}]"
        else:
            out = f"{out}.{p}" if out else str(p)
    return out

def _clean_message(msg: str) -> str:
    prefix = "Value error, "
    return msg[len(prefix):] if msg.startswith(prefix) else msg

def field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {"field": _field_path(tuple(e.get("loc", ()))), "message": _clean_message(e.get("msg", ""))}
        for e in exc.errors()
    ]

async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    err = ValidationFailed(field_errors(exc))
    return JSONResponse(status_code=err.status_code, content=jsonable_encoder({"detail": err.detail}))

async def _unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    detail: dict[str, Any] = {"code": "INTERNAL_SERVER_ERROR", "message": "an unexpected error occurred"}
    if settings.expose_error_details:
        detail["type"] = type(exc).__name__
        detail["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": detail})

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
