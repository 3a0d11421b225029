"""
Error taxonomy for the News Verification API and the handlers that
render it as ``{"error": ...}``.
"""

import logging
from typing import Any, List, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for failures reported to the caller."""

    status_code = 500
    default_detail = "Internal server error"
    headers = None

    def __init__(self, detail: Union[str, List[dict], None] = None):
        self.detail = detail if detail is not None else self.default_detail
        super().__init__(self.detail if isinstance(self.detail, str) else self.default_detail)


class Unauthenticated(ServiceError):
    """No token, or a token that does not identify a user."""
    status_code = 401
    default_detail = "Authentication required"
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(ServiceError):
    """Valid identity whose role does not allow the action."""
    status_code = 403
    default_detail = "Insufficient permissions"


class NotFound(ServiceError):
    """Resource absent, or hidden from this caller."""
    status_code = 404
    default_detail = "Not found"


class ValidationFailed(ServiceError):
    """Malformed or missing input."""
    status_code = 400
    default_detail = "Invalid request"


class Conflict(ServiceError):
    """A business uniqueness rule was violated (duplicate vote or email)."""
    status_code = 400
    default_detail = "Conflict"


class InvalidToken(Exception):
    """Raised by the token verifier for missing, malformed or forged tokens."""


def _error_body(detail: Any) -> dict:
    return {"error": detail}


def validation_issues(exc: RequestValidationError) -> List[dict]:
    """Flatten pydantic errors into one issue per violated field."""
    issues = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        issues.append({
            "field": ".".join(loc) or "body",
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        })
    return issues


async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.detail), headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=_error_body(validation_issues(exc)))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    """Attach the handlers that shape every error response."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
