"""API middleware for the storefront admin API.

Every request gets a correlation id that is echoed in the ``X-Request-ID``
header, bound into the structlog context and copied into error bodies.
Failures that escape the exception handlers still produce the standard
error body.
"""

import re
import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger()

INTERNAL_ERROR_MESSAGE = "An internal error occurred"
REQUEST_ID_HEADER = "X-Request-ID"

# Client ids are echoed into headers and logs, so only short plain tokens are kept.
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")


def error_body(
    message: str,
    error_code: str,
    request_id: str | None,
    details: list | None = None,
) -> dict:
    """Build the JSON body shared by every error response."""
    return {
        "error": message,
        "errorCode": error_code,
        "details": details or [],
        "requestId": request_id,
    }


def resolve_request_id(header_value: str | None) -> str:
    """Reuse the client's request id when it is a plain token, else make one."""
    if header_value and _REQUEST_ID_PATTERN.match(header_value):
        return header_value
    return str(uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlates logs and responses for one request.

    The request id lands in ``request.state.request_id`` for the exception
    handlers, and ``request_id``/``method``/``path`` are bound to the log
    context for everything logged while the request runs.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        started = time.perf_counter()
        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            if response.status_code >= 500:
                log = logger.error
            elif response.status_code >= 400:
                log = logger.warning
            else:
                log = logger.info
            log("Request completed", status_code=response.status_code, duration_ms=elapsed_ms)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Turns exceptions nothing else handled into a 500 error body."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception("Unhandled exception", error=str(e))
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=error_body(
                    INTERNAL_ERROR_MESSAGE,
                    "INTERNAL_ERROR",
                    getattr(request.state, "request_id", None),
                ),
            )


def setup_middleware(app: FastAPI) -> None:
    """Install the request context and error middleware.

    The last middleware added runs first, so the request context wraps the
    error middleware and its id reaches the 500 body and header.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(RequestContextMiddleware)
