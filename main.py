"""
Fitva FastAPI Application
Entry point: logging, schema start-up, middleware, error handlers and routers
"""

from contextlib import asynccontextmanager
import logging

import anyio
import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.middleware import (
    RequestLoggingMiddleware,
    general_exception_handler,
    http_exception_handler,
    service_exception_handler,
    validation_exception_handler,
)
from api.routes import goals, health, meals, nutrition, users
from app.config import settings
from app.exceptions import ServiceError
from domain.models import init_database

logging.basicConfig(level=getattr(logging, settings.log_level), format=settings.log_format)
_logger = logging.getLogger("fitva.main")


async def init_database_with_retry() -> None:
    """Create the schema, waiting for the database to accept connections"""
    attempts = settings.db_init_attempts
    for attempt in range(1, attempts + 1):
        try:
            # blocking DDL runs in a worker thread
            await anyio.to_thread.run_sync(init_database)
            _logger.info(f"db_init_succeeded attempt={attempt}")
            return
        except Exception as exc:
            _logger.warning(f"db_init_failed attempt={attempt}/{attempts} error={exc}")
            if attempt == attempts:
                _logger.error(f"db_init_gave_up attempts={attempts}")
                raise
            await anyio.sleep(settings.db_init_delay_sec)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _logger.info(f"Starting {settings.app_name} in {settings.environment.value} mode")
    await init_database_with_retry()
    try:
        yield
    finally:
        _logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    docs_enabled = not settings.is_production()
    prefix = settings.api_prefix

    application = FastAPI(
        title=settings.api_title,
        version=settings.app_version,
        description=settings.api_description,
        lifespan=lifespan,
        debug=settings.debug,
        openapi_url=f"{prefix}/openapi.json" if docs_enabled else None,
        docs_url=f"{prefix}/docs" if docs_enabled else None,
        redoc_url=f"{prefix}/redoc" if docs_enabled else None,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    application.add_middleware(RequestLoggingMiddleware)

    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(ServiceError, service_exception_handler)
    application.add_exception_handler(Exception, general_exception_handler)

    for module in (health, users, meals, nutrition, goals):
        application.include_router(module.router, prefix=prefix)

    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
