"""Storefront FastAPI application.

Usage:
    uvicorn storefront.infrastructure.api.app:create_app --factory
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from storefront.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    ForbiddenError,
    OperationTimeoutError,
    UnauthenticatedError,
    ValidationError,
)
from storefront.infrastructure.api.routes.catalog_routes import category_router, product_router
from storefront.infrastructure.api.routes.order_routes import order_router
from storefront.infrastructure.api.routes.user_routes import auth_router, user_router
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)

logger = structlog.get_logger(__name__)

RETRY_AFTER_SECONDS = 1


def status_code_for(exc: DomainException) -> int:
    if isinstance(exc, EntityNotFoundError):
        return 404
    if isinstance(exc, ForbiddenError):
        return 403
    if isinstance(exc, UnauthenticatedError):
        return 401
    if isinstance(exc, OperationTimeoutError):
        return 503
    if isinstance(exc, ValidationError):
        return 400
    return 500


def _error_body(kind: str, message: str) -> dict:
    return {"success": False, "error": kind, "message": message}


async def _domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = status_code_for(exc)
    headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if status_code == 503 else None
    if status_code >= 500:
        logger.error("Request failed", kind=exc.kind, error=str(exc))
    return JSONResponse(_error_body(exc.kind, str(exc)), status_code=status_code, headers=headers)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(_error_body(ValidationError.kind, details), status_code=400)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(_error_body("Unexpected", "Internal server error"), status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Storefront API",
        description="Catalog, users and order lifecycle",
    )
    app.state.settings = settings

    app.add_exception_handler(DomainException, _domain_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        clear_request_context()
        bind_request_context(
            request_id=uuid.uuid4().hex,
            method=request.method,
            path=request.url.path,
        )
        return await call_next(request)

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(product_router)
    app.include_router(category_router)
    app.include_router(order_router)

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads/products", StaticFiles(directory=settings.upload_dir), name="uploads")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app
