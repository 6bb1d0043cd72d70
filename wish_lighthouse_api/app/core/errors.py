"""
Error taxonomy and HTTP error rendering.

Services raise the exceptions defined here; they never build HTTP
responses themselves.  ``register_exception_handlers`` wires the
exceptions into a FastAPI application so that every failure is
rendered with the same envelope used for successful responses::

    {"success": false, "message": "...", "errors": ["..."]}

* ``ValidationError`` -> 400, with one message per offending field.
  FastAPI's own ``RequestValidationError`` (bad JSON body or query
  string) is mapped to the same 400 shape.
* ``NotFoundError`` -> 404.  This is an expected outcome and is logged
  at INFO, not as an error.
* Anything else -> 500.  The traceback is logged; the response hides
  the exception text unless the app runs in development mode, where a
  ``stack`` field is added as well.
"""

import logging
import traceback
from typing import Any, Dict, Iterable, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)


class WishAPIError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, errors: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors: List[str] = list(errors) if errors else []


class ValidationError(WishAPIError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: Iterable[str], message: str = "Validation Error") -> None:
        super().__init__(message, errors)


class NotFoundError(WishAPIError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(WishAPIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(message: str, errors: Optional[List[str]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body


def format_validation_errors(raw_errors: Iterable[Dict[str, Any]]) -> List[str]:
    """Turn pydantic error dicts into ``"field: reason"`` strings.

    The leading location segment (``body``/``query``/``path``) is dropped
    so clients see the field name they sent.
    """
    messages = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in {"body", "query", "path", "header"}:
            loc = loc[1:]
        msg = err.get("msg", "Invalid value")
        # Custom validators surface as "Value error, <text>" in pydantic v2
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Attach the envelope-rendering exception handlers to ``app``."""

    @app.exception_handler(WishAPIError)
    async def handle_wish_api_error(request: Request, exc: WishAPIError) -> JSONResponse:
        if isinstance(exc, NotFoundError):
            logger.info("%s %s: %s", request.method, request.url.path, exc.message)
        elif exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
            if not debug:
                return JSONResponse(
                    status_code=exc.status_code,
                    content=error_body("Internal Server Error"),
                )
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.errors or exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.errors),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = format_validation_errors(exc.errors())
        logger.warning("%s %s rejected: %s", request.method, request.url.path, errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("Validation Error", errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = str(exc.detail)
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "API endpoint not found"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = error_body(str(exc) if debug and str(exc) else "Internal Server Error")
        if debug:
            body["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
