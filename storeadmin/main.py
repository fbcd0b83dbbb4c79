"""Storefront admin API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, exception handlers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from storeadmin.api import (
    categories_router,
    health_router,
    homepage_router,
    products_router,
    search_tree_router,
    uploads_router,
)
from storeadmin.api.middleware import INTERNAL_ERROR_MESSAGE, error_body, setup_middleware
from storeadmin.domain.exceptions import CorruptTreeError, DomainError, NotFoundError
from storeadmin.infrastructure.config import settings
from storeadmin.infrastructure.database import create_tables
from storeadmin.infrastructure.logging import configure_logging

configure_logging(settings)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    logger.info(
        "Starting storefront admin API",
        version=settings.api_version,
        debug=settings.debug,
    )

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    if settings.database_auto_create:
        await create_tables()
        logger.info("Database tables ensured")

    yield

    # Shutdown
    logger.info("Shutting down storefront admin API")


app = FastAPI(
    title="Storefront Admin API",
    description="Catalog administration backend: categories, search tree, products, uploads",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(categories_router, prefix="/api")
app.include_router(search_tree_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(homepage_router, prefix="/api")
app.include_router(uploads_router, prefix="/api")

# Uploaded images
app.mount(
    settings.upload_url_prefix,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain errors to 404 (missing records), 500 (corrupt stored data) or 400."""
    if isinstance(exc, CorruptTreeError):
        logger.error(
            "Stored taxonomy is corrupt",
            path=request.url.path,
            error_code=exc.error_code,
            error=exc.message,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(exc.message, exc.error_code, _request_id(request), [exc.details]),
        )

    status_code = (
        status.HTTP_404_NOT_FOUND
        if isinstance(exc, NotFoundError)
        else status.HTTP_400_BAD_REQUEST
    )
    logger.info(
        "Request rejected",
        path=request.url.path,
        error_code=exc.error_code,
        error=exc.message,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_body(
            exc.message,
            exc.error_code,
            _request_id(request),
            [exc.details] if exc.details else [],
        ),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies and parameters as 400."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"

    details = [
        {"loc": [str(part) for part in e.get("loc", ())], "msg": e.get("msg"), "type": e.get("type")}
        for e in errors
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(message, "VALIDATION_ERROR", _request_id(request), details),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
    else:
        error_code = "NOT_FOUND" if exc.status_code == status.HTTP_404_NOT_FOUND else "ERROR"
        message = str(detail)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, error_code, _request_id(request)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(INTERNAL_ERROR_MESSAGE, "INTERNAL_ERROR", _request_id(request)),
    )
