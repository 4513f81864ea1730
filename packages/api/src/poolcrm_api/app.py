"""FastAPI application factory."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from poolcrm_shared import __version__
from poolcrm_shared.config import settings
from poolcrm_shared.logging import configure_logging

from poolcrm_api.errors import AppError
from poolcrm_api.middleware.logging import LoggingMiddleware
from poolcrm_api.middleware.rate_limit import RateLimitMiddleware
from poolcrm_api.responses import error_response
from poolcrm_api.routers.health import router as health_router
from poolcrm_api.routers.v1 import v1_router

logger = structlog.get_logger()


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.code, exc.message, details=exc.details),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = [str(err.get("msg", "Invalid request")) for err in exc.errors()]
    return JSONResponse(
        status_code=400,
        content=error_response(
            "VALIDATION_ERROR",
            ", ".join(messages) or "Invalid request",
            details={"errors": messages},
        ),
    )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Pool CRM API",
        description="Customers, properties, pools, estimates and scheduling for a pool business",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Custom middleware (order matters: last added = first executed)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routers
    app.include_router(health_router)
    app.include_router(v1_router)

    logger.info(
        "app_created",
        cors_origins=settings.cors_origins_list,
        environment=settings.environment,
    )
    return app


app = create_app()
