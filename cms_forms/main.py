# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from cms_forms.api.api import api_router, public_router
from cms_forms.core.config import settings
from cms_forms.core.exceptions import (
    RequestValidationError,
    http_exception_handler,
    python_exception_handler,
    validation_exception_handler,
)
from cms_forms.core.fixture_init import run_fixture_initialization
from cms_forms.core.logging import setup_logging
from cms_forms.db.base import Base
from cms_forms.db.session import SessionLocal, engine
from cms_forms.models import *  # noqa: F401,F403

# Initialize logging at module level for use in lifespan
setup_logging()
_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.
    Creates missing tables and loads seed data on startup.
    """
    logger = _logger

    # ==================== STARTUP ====================
    if settings.ENVIRONMENT == "development" and settings.DB_AUTO_CREATE:
        logger.info("Creating missing database tables (development mode)...")
        Base.metadata.create_all(bind=engine)
        logger.info("✓ Database tables ready")
    elif settings.ENVIRONMENT == "production":
        logger.warning(
            "Running in production mode. Database tables must be created manually."
        )

    logger.info("Starting seed data initialization...")
    db = SessionLocal()
    try:
        run_fixture_initialization(db)
        logger.info("✓ Seed data initialization completed")
    except Exception as e:
        logger.error(f"✗ Failed to initialize seed data: {e}")
    finally:
        db.close()

    logger.info("Application startup completed successfully!")

    # ==================== YIELD (app is running) ====================
    yield

    # ==================== SHUTDOWN ====================
    engine.dispose()
    logger.info("✓ Application shutdown completed")


def create_app():
    # Toggle API docs/OpenAPI via environment (settings.ENABLE_API_DOCS, default True)
    enable_docs = settings.ENABLE_API_DOCS
    openapi_url = f"{settings.API_PREFIX}/openapi.json" if enable_docs else None
    docs_url = f"{settings.API_PREFIX}/docs" if enable_docs else None
    redoc_url = f"{settings.API_PREFIX}/redoc" if enable_docs else None

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="CMS form submission and form entry management API",
        version=settings.VERSION,
        openapi_url=openapi_url,
        docs_url=docs_url,
        redoc_url=redoc_url,
        lifespan=lifespan,
    )

    logger = _logger

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Skip logging for health check/probe requests (root path)
        if request.url.path == "/":
            return await call_next(request)

        # Use first 8 characters of UUID as request ID
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()

        from cms_forms.core.security import get_username_from_request

        username = get_username_from_request(request)
        client_ip = request.client.host if request.client else "Unknown"

        logger.info(
            f"request : {request.method} {request.url.path} {request.query_params} {request_id} {client_ip} [{username}]"
        )

        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000

        logger.info(
            f"response: {request.method} {request.url.path} {request.query_params} {request_id} {client_ip} [{username}] {response.status_code} {process_time:.2f}ms"
        )

        # Add request ID to response headers for client-side tracking
        response.headers["X-Request-ID"] = request_id

        return response

    # Setup CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.BACKEND_CORS_ORIGINS.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, python_exception_handler)

    # Include routers
    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(public_router)

    return app


app = create_app()


# Root path
@app.get("/")
async def root():
    """
    Root path, returns API information
    """
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "api_prefix": settings.API_PREFIX,
        "docs_url": f"{settings.API_PREFIX}/docs",
    }
